import pytest

from lndwcc.ast import ParseError
from lndwcc.compiler import CompileOptions, Compiler
from lndwcc.isa import Result, Store
from lndwcc.options import InterpreterOptions
from lndwcc.output import FRAME_TIME, AssemblyOutput


def _finish(output, limit=100_000):
    for _ in range(limit):
        if output.tick():
            return True
    return False


def test_empty_view():
    output = AssemblyOutput("output.unopt")
    assert output.name == "output.unopt"
    assert output.instructions() == []
    assert output.is_running() is False
    assert output.tick() is False


def test_constructed_with_instructions():
    program = [Store(4, "a"), Result("a")]
    output = AssemblyOutput("x", program)
    assert output.instructions() == program
    assert output.progress == (0.0, 0.0)


def test_compile_matches_compiler():
    output = AssemblyOutput("out")
    variables = output.compile("a * 2 + b", CompileOptions(), InterpreterOptions())
    expected, expected_vars = Compiler(CompileOptions(), InterpreterOptions()).compile("a * 2 + b")
    assert variables == expected_vars == {"a", "b"}
    assert output.instructions() == expected
    assert output.error is None


def test_compile_error_recorded_and_raised():
    output = AssemblyOutput("out")
    with pytest.raises(ParseError) as info:
        output.compile("(1 + 2+)")
    assert output.error == f"Compile error: {info.value}"
    assert output.instructions() == []


def test_run_sets_result_and_running():
    output = AssemblyOutput("out")
    output.compile("3 + 2 + 1")
    output.run({})
    assert output.program_result == 6
    assert output.is_running() is True
    assert output.interpreter is not None


def test_run_without_instructions_does_nothing():
    output = AssemblyOutput("out")
    output.run({}, stepwise=True)
    assert output.program_result is None
    assert output.is_running() is False
    assert output.stepwise is True


def test_runtime_error_recorded():
    output = AssemblyOutput("out")
    output.compile("1 / 0")
    output.run({})
    assert output.error.startswith("Runtime error:")
    assert output.program_result is None
    assert output.is_running() is False


def test_missing_variable_is_runtime_error():
    output = AssemblyOutput("out")
    output.compile("x + 1")
    output.run({})
    assert output.error.startswith("Runtime error:")


def test_animation_completes_with_result():
    output = AssemblyOutput("out")
    output.compile("x + 1")
    output.run({"x": "41"})
    assert _finish(output)
    assert all(p >= 1.0 for p in output.progress)
    assert output.interpreter.running is False
    assert output.current() == f"= {output.program_result}"
    assert output.total_time >= FRAME_TIME * len(output.instructions())


def test_stepwise_waits_for_trigger():
    output = AssemblyOutput("out")
    output.compile("1 + 1")
    output.run({}, stepwise=True)
    assert output.tick() is False
    assert output.progress == tuple(0.0 for _ in output.instructions())
    assert output.can_step()

    output.trigger_step()
    assert output.step_triggered is True
    while output.step_triggered:
        output.tick()
    assert output.progress[0] >= 1.0
    assert all(p == 0.0 for p in output.progress[1:])
    assert output.can_step()


def test_run_to_finish_leaves_stepwise_mode():
    output = AssemblyOutput("out")
    output.compile("2 * 3")
    output.run({}, stepwise=True)
    output.run_to_finish()
    assert output.stepwise is False
    assert _finish(output)
    assert output.interpreter.running is False


def test_second_run_keeps_interpreter():
    output = AssemblyOutput("out")
    output.compile("1 + 1")
    output.run({})
    first = output.interpreter
    output.run({})
    assert output.interpreter is first


def test_clear_resets_everything():
    output = AssemblyOutput("out")
    output.compile("1 + 1")
    output.run({})
    output.tick()
    output.clear()
    assert output.instructions() == []
    assert output.interpreter is None
    assert output.program_result is None
    assert output.total_time == 0.0
    assert output.is_running() is False
    assert output.name == "out"


def test_registers_follow_hardware():
    output = AssemblyOutput("out")
    output.compile("1 + 1", CompileOptions(), InterpreterOptions(num_registers=3))
    assert output.registers() == [("a", 0), ("b", 0), ("c", 0)]
    output.run({})
    _finish(output)
    assert [name for name, _ in output.registers()] == ["a", "b", "c"]
    assert output.program_result in [value for _, value in output.registers()]


def test_visible_ram_bounds():
    output = AssemblyOutput("out")
    output.compile("1 + 1", CompileOptions(), InterpreterOptions(num_cachelines=16))
    cells, more = output.visible_ram()
    assert [index for index, _ in cells] == [0, 1, 2, 3]
    assert more is True

    small = AssemblyOutput("out")
    small.compile("1 + 1", CompileOptions(), InterpreterOptions(num_cachelines=2))
    cells, more = small.visible_ram()
    assert len(cells) == 2
    assert more is False


def test_small_machine_gives_same_result():
    source = "(1000 + 2) * (4 * 5 + (15 / 3) + 17 * 13 - 8 * 2)"
    big = AssemblyOutput("big")
    big.compile(source)
    big.run({})
    small = AssemblyOutput("small")
    small.compile(source, CompileOptions(), InterpreterOptions(num_registers=2))
    small.run({})
    assert small.error is None
    assert small.program_result == big.program_result
    assert _finish(small)
    assert small.interpreter.running is False