"""Command line front end: compile an expression, show the instructions and run them."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional, Tuple

from lndwcc.compiler import CompileOptions
from lndwcc.examples import preloaded_examples
from lndwcc.options import InterpreterOptions
from lndwcc.output import AssemblyOutput
from lndwcc.workbench import EditorAction, Workbench

APP_NAME = "tud-ccc-demo-compiler"


def _variable(text: str) -> Tuple[str, str]:
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    return name, value.strip()


def _bounded(low: int, high: Optional[int]) -> Callable[[str], int]:
    def convert(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
        if value < low or (high is not None and value > high):
            upper = "" if high is None else f" and at most {high}"
            raise argparse.ArgumentTypeError(f"must be at least {low}{upper}")
        return value

    return convert


def _build_parser() -> argparse.ArgumentParser:
    defaults = InterpreterOptions()
    parser = argparse.ArgumentParser(
        prog="lndwcc",
        description="Compile an arithmetic expression for a small register machine and run it.",
    )
    parser.add_argument("expression", nargs="?", help="expression to compile")
    parser.add_argument(
        "-v", "--var", action="append", type=_variable, default=[],
        metavar="NAME=VALUE", help="value of an input variable",
    )
    parser.add_argument("--fold", action="store_true", help="constant folding")
    parser.add_argument("--cache", action="store_true", help="drop unneeded RAM writes")
    parser.add_argument("--factor", action="store_true", help="common factor elimination")
    parser.add_argument("--shift", action="store_true", help="replace multiplications with shifts")
    parser.add_argument(
        "--registers", type=_bounded(1, 26), default=defaults.num_registers,
        help="number of registers",
    )
    parser.add_argument(
        "--cachelines", type=_bounded(0, None), default=defaults.num_cachelines,
        help="number of RAM cells",
    )
    parser.add_argument("--example", type=int, help="use the preloaded example with this index")
    parser.add_argument(
        "--list-examples", action="store_true", help="list the preloaded examples and exit"
    )
    return parser


def _report(label: str, output: AssemblyOutput) -> bool:
    print(f"{label}:")
    for inst in output.instructions():
        print(f"  {inst}")
    if output.error is not None:
        print(output.error, file=sys.stderr)
        return False
    if output.program_result is not None:
        print(f"result = {output.program_result}")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool; return the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    examples = preloaded_examples()

    if args.list_examples:
        for index, example in enumerate(examples):
            print(f"{index}: {example.input}")
        return 0

    bench = Workbench(hw=InterpreterOptions(args.registers, args.cachelines))
    if args.example is not None:
        if not 0 <= args.example < len(examples):
            parser.error(f"--example must be between 0 and {len(examples) - 1}")
        bench.use_example(args.example)
    elif args.expression is None:
        parser.error("an expression or --example is required")
    else:
        bench.code = args.expression
        bench.compile_options = CompileOptions(
            do_constant_folding=args.fold,
            run_cache_optimization=args.cache,
            do_common_factor_elimination=args.factor,
            do_shift_replacement=args.shift,
        )

    print(f"program: {bench.code}")
    bench.perform(EditorAction.COMPILE)
    bench.input_variables.update(dict(args.var))
    bench.perform(EditorAction.RUN)

    ok = _report("unoptimized", bench.asm_unoptimized)
    if bench.compile_options.any():
        ok = _report("optimized", bench.asm_optimized) and ok
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())