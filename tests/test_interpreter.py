import pytest

from lndwcc.ast import I32_MAX, I32_MIN, InterpretError
from lndwcc.compiler import Compiler
from lndwcc.interpreter import Interpreter
from lndwcc.isa import Add, Div, Load, Result, Store, Sub, Transfer, Write
from lndwcc.options import InterpreterOptions


def _ready(program, variables=None, hw=None):
    interpreter = Interpreter(hw).load_instructions(program)
    if variables is not None:
        interpreter.with_variables(variables)
    return interpreter.ready()


def test_store_and_result():
    assert _ready([Store(5, "a"), Result("a")]).run_to_end() == 5


def test_subtraction_direction():
    program = [Store(7, "a"), Store(3, "b"), Sub("a", "b"), Result("b")]
    assert _ready(program).run_to_end() == 4


def test_addition_wraps_around():
    program = [Store(I32_MAX, "a"), Store(1, "b"), Add("a", "b"), Result("b")]
    assert _ready(program).run_to_end() == I32_MIN


def test_division_by_zero():
    program = [Store(7, "a"), Store(0, "b"), Div("a", "b"), Result("b")]
    with pytest.raises(InterpretError):
        _ready(program).run_to_end()


def test_missing_operand_register():
    with pytest.raises(InterpretError):
        _ready([Store(1, "b"), Add("a", "b"), Result("b")]).run_to_end()


def test_step_before_ready_fails():
    interpreter = Interpreter().load_instructions([Store(1, "a"), Result("a")])
    with pytest.raises(InterpretError):
        interpreter.step()


def test_program_without_result_fails():
    with pytest.raises(InterpretError, match="no result found"):
        _ready([Store(1, "a")]).run_to_end()


def test_step_returns_none_until_finished():
    interpreter = _ready([Store(5, "a"), Result("a")])
    assert interpreter.step() is None
    assert interpreter.step() == 5
    assert interpreter.running is False
    with pytest.raises(InterpretError):
        interpreter.step()


def test_result_of_empty_register_fails():
    interpreter = _ready([Result("a")])
    with pytest.raises(InterpretError, match="empty"):
        interpreter.step()
    assert interpreter.running is False


def test_transfer_reads_variable():
    program = [Transfer("x", "a"), Result("a")]
    assert _ready(program, {"x": "-5"}).run_to_end() == -5
    assert _ready(program, {"x": "+12"}).run_to_end() == 12


@pytest.mark.parametrize(
    "variables",
    [None, {}, {"x": ""}, {"x": "abc"}, {"x": "1.5"}, {"x": " 3"}, {"x": str(I32_MAX + 1)}],
)
def test_transfer_errors(variables):
    with pytest.raises(InterpretError):
        _ready([Transfer("x", "a"), Result("a")], variables).run_to_end()


def test_write_and_load_round_trip():
    interpreter = _ready([Store(9, "a"), Write("a", 0), Load(0, "b"), Result("b")])
    assert interpreter.run_to_end() == 9
    assert interpreter.ram[0] == 9
    assert interpreter.reg_store["b"] == 9


def test_ram_address_out_of_range():
    hw = InterpreterOptions(num_cachelines=1)
    with pytest.raises(InterpretError, match="doesn't exist"):
        _ready([Store(1, "a"), Write("a", 1), Result("a")], hw=hw).run_to_end()
    with pytest.raises(InterpretError, match="doesn't exist"):
        _ready([Load(1, "a"), Result("a")], hw=hw).run_to_end()


def test_write_from_empty_register():
    with pytest.raises(InterpretError):
        _ready([Write("a", 0), Result("a")]).run_to_end()


def test_ram_size_follows_options():
    assert Interpreter(InterpreterOptions(num_cachelines=3)).ram == [0, 0, 0]


def test_tracing_describes_instructions():
    program = [Store(2, "a"), Store(3, "b"), Add("a", "b"), Result("b")]
    interpreter = Interpreter().load_instructions(program).with_tracing().ready()
    assert interpreter.display_current() == "2 ➡ [a]"
    interpreter.step()
    assert interpreter.display_current() == "2 ➡ [a]"
    interpreter.step()
    assert interpreter.display_current() == "3 ➡ [b]"
    interpreter.step()
    assert interpreter.display_current() == "2 + 3"


def test_tracing_of_result_and_memory():
    program = [Store(4, "a"), Write("a", 0), Load(0, "b"), Transfer("v", "c"), Result("a")]
    interpreter = _ready(program, {"v": "1"}).with_tracing()
    seen = []
    while interpreter.running:
        interpreter.step()
        seen.append(interpreter.display_current())
    assert seen == ["4 ➡ [a]", "⎘ [a] ➡ [0]", "⎗ [b] ⬅ [0]", "v ➡ [c]", "= 4"]


def test_reset_clears_state_and_allows_rerun():
    interpreter = _ready([Store(9, "a"), Write("a", 0), Load(0, "b"), Result("b")])
    first = interpreter.run_to_end()
    interpreter.reset()
    assert interpreter.reg_store == {}
    assert interpreter.ram == [0] * 16
    assert interpreter.ready().run_to_end() == first


def test_runs_compiled_program():
    program, _ = Compiler().compile("(x + 1) * (x + 1)")
    interpreter = _ready(program, {"x": "3"})
    squared = interpreter.run_to_end()
    again = _ready(Compiler().compile("(x + 1) * (x + 1)")[0], {"x": "3"}).run_to_end()
    assert squared == again
    assert squared > 0