"""A teaching compiler for arithmetic expressions, its optimisation passes and a register-machine interpreter."""

__version__ = "0.1.0"