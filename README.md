# lndwcc

A small compiler for integer arithmetic expressions, made for showing how
compilers work. It parses expressions such as `1000 * 2 + x * 13 - y * 2`,
can optimise them, turns them into instructions for a simple register
machine, and runs those instructions in an interpreter that can be traced
step by step.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## The language

- integer literals: `42` (up to 2147483647)
- variables: ASCII letters, digits and `_`, not starting with a digit: `x`, `speed`
- the binary operators `+ - * /` with the usual precedence, left associative
- unary minus: `-x`, `--3`
- parentheses: `(1 + 2) * 3`

Arithmetic is done on signed 32-bit integers that wrap around; division
truncates towards zero.

## Optimisation passes

Each pass is switched on by itself through `lndwcc.compiler.CompileOptions`:

| Option                         | What it does                                                        |
|--------------------------------|---------------------------------------------------------------------|
| `do_constant_folding`          | evaluates constant sub-expressions at compile time                  |
| `do_common_factor_elimination` | rewrites `f * a + f * b` as `f * (a + b)`                           |
| `do_shift_replacement`         | rewrites multiplication and division by a power of two as a shift   |
| `run_cache_optimization`       | drops writes to RAM cells that are never loaded again               |

`CompileOptions.any()` tells whether at least one of them is on. The passes
are also available as plain functions:
`lndwcc.constant_folding.fold_constants`,
`lndwcc.common_factors.extract_common_factors`,
`lndwcc.shift_replacement.replace_multiplications_with_bitshifts` and
`lndwcc.cache.run_cache_optimization`.

## The machine

The target machine has a small number of registers, named `a`, `b`, `c`, …
(at most 26), and a RAM with a fixed number of cells.
`lndwcc.options.InterpreterOptions` describes it; by default there are 6
registers and 16 RAM cells. When the registers run out the compiler spills
values to RAM and loads them back later.

The instructions in `lndwcc.isa` are `Store`, `Transfer` (read an input
variable), `Add`, `Sub`, `Mul`, `Div`, `Shl`, `Shr`, `Write` (register to
RAM), `Load` (RAM to register) and `Result`.

## Using it from Python

```python
from lndwcc.compiler import CompileOptions, Compiler
from lndwcc.interpreter import Interpreter
from lndwcc.options import InterpreterOptions

hw = InterpreterOptions()
options = CompileOptions(do_constant_folding=True)

instructions, variables = Compiler(options, hw).compile("1000 * 2 + x * 13")
print(sorted(variables))          # ['x']

result = (
    Interpreter(hw)
    .load_instructions(instructions)
    .with_variables({"x": "3"})
    .ready()
    .run_to_end()
)
print(result)                     # 2039
```

Input variables are given as strings, as a user would type them; the
interpreter reports an empty or non-numeric value as an error.
`Interpreter.step()` executes one instruction at a time and returns the
result once `Result` is reached; with `with_tracing()` the method
`display_current()` describes the instruction just executed.

The expression tree can be worked on directly:

```python
from lndwcc.parser import parse
from lndwcc.constant_folding import fold_constants
from lndwcc.shift_replacement import replace_multiplications_with_bitshifts

expr = parse("16 / 2 * 4")
print(replace_multiplications_with_bitshifts(expr))
print(fold_constants(expr))       # Num(value=32)
```

Errors are raised as subclasses of `lndwcc.ast.LpError`: `ParseError` for
input that does not parse, `IRError` for problems during code generation
(for example more than 26 registers) and `InterpretError` for failures at
run time, such as division by zero or an unknown variable.

`lndwcc.examples.preloaded_examples()` returns the built-in example
programs, each with the compile options that show off one of the passes.
`lndwcc.output.AssemblyOutput` holds one compiled version of a program and
the frame-by-frame progress of its run (`tick()`, `trigger_step()`,
`run_to_finish()`, `registers()`, `visible_ram()`), and
`lndwcc.workbench.Workbench` ties the edited program, the unoptimised and
optimised versions and the examples together through `perform()` with an
`EditorAction` (`COMPILE`, `RUN`, `STEP`, `CLEAR`) and `use_example()`.

## Command line

The package installs the `lndwcc` command. It compiles an expression, prints
the instructions and runs them:

```
lndwcc "x * 4 + 2" --var x=5 --shift
```

Options: `--var NAME=VALUE` (repeatable) gives input values; `--fold`,
`--cache`, `--factor` and `--shift` switch on the passes, in which case the
optimised version is printed and run as well; `--registers` and
`--cachelines` set the machine size; `--example N` uses a preloaded example
and `--list-examples` lists them. The exit status is 1 if compiling or
running failed. To see everything it accepts:

```
lndwcc --help
```

## What it does not do

There is no graphical interface. `Workbench` and `AssemblyOutput` keep the
state a display would show, including animation progress and open views,
but nothing draws it. `Workbench.set_language` only records the chosen
language code (`en` or `de`); all messages and instruction texts are in
English.