import string

import pytest

from lndwcc.isa import (
    Add,
    BinaryInst,
    Div,
    Load,
    Mul,
    Result,
    Shl,
    Shr,
    Store,
    Sub,
    Transfer,
    Write,
    register_name,
)


def test_first_and_last_register():
    assert register_name(0) == "a"
    assert register_name(25) == "z"


def test_register_names_are_distinct_letters():
    names = [register_name(i) for i in range(26)]
    assert "".join(names) == string.ascii_lowercase


@pytest.mark.parametrize("index", [26, 27, -1, 100])
def test_register_out_of_range(index):
    with pytest.raises(ValueError):
        register_name(index)


@pytest.mark.parametrize("cls", [Add, Sub, Mul, Div, Shl, Shr])
def test_binary_instructions_hold_registers(cls):
    inst = cls("a", "b")
    assert (inst.a, inst.b) == ("a", "b")
    assert isinstance(inst, BinaryInst)
    assert inst == cls("a", "b")


def test_instruction_kinds_are_not_equal():
    assert Add("a", "b") == Add("a", "b")
    assert len({Add("a", "b"), Sub("a", "b"), Mul("a", "b")}) == 3


def test_memory_instructions_fields():
    assert Write("c", 4).addr == Load(4, "c").addr
    assert Write("c", 4).reg == Load(4, "c").reg


def test_instructions_are_hashable():
    program = [Store(5, "a"), Transfer("x", "b"), Add("a", "b"), Result("b")]
    assert len(set(program)) == len(program)


def test_text_form_names_operands():
    assert str(Load(3, "b")) == "load 3, b"
    assert "x" in str(Transfer("x", "a"))
    assert str(Result("c")).endswith("c")