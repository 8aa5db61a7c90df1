import math
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import ClassVar, Optional, Tuple, Union

from .tokens import TokenKind

REGISTER_COUNT = 16


class ValueTag(IntEnum):
    """Wire tags for values, in declaration order."""

    NIL = 0
    NUMBER = 1
    STRING = 2
    BOOLEAN = 3
    FUNCTION = 4
    ARRAY = 5


class Opcode(IntEnum):
    """Wire tags for commands, in declaration order."""

    PUSH = 0
    DUP = 1
    SWAP = 2
    ILOAD = 3
    LOAD = 4
    DROP = 5
    QUERY = 6
    INFO = 7
    IF = 8
    EACH = 9
    REDUCE = 10
    REVERSE = 11
    MAP = 12
    FILTER = 13
    CALL = 14
    TOSTR = 15
    TONUM = 16
    ADD = 17
    SUB = 18
    MUL = 19
    DIV = 20
    MOD = 21
    EQ = 22
    NOT_EQ = 23
    GREATER = 24
    GREATER_EQ = 25
    LESS = 26
    LESS_EQ = 27
    AND = 28
    OR = 29
    NOT = 30
    CONCAT = 31
    MATCH = 32
    SPLIT = 33
    IOTA = 34

    @property
    def keyword(self) -> str:
        return TokenKind[self.name].value


OPERAND_OPCODES = frozenset({Opcode.PUSH, Opcode.ILOAD})


def format_number(value: float) -> str:
    if math.isfinite(value) and value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    if not math.isfinite(value):
        return repr(value)
    # Positional notation so the text lexes back as a single number.
    return format(Decimal(repr(value)), "f")


@dataclass(frozen=True)
class Nil:
    TAG: ClassVar[ValueTag] = ValueTag.NIL

    def __str__(self) -> str:
        return "nil"


@dataclass(frozen=True)
class Number:
    TAG: ClassVar[ValueTag] = ValueTag.NUMBER
    value: float

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class String:
    TAG: ClassVar[ValueTag] = ValueTag.STRING
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class Boolean:
    TAG: ClassVar[ValueTag] = ValueTag.BOOLEAN
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Function:
    TAG: ClassVar[ValueTag] = ValueTag.FUNCTION
    commands: Tuple["Command", ...] = ()

    def __str__(self) -> str:
        return "{" + " ".join(str(cmd) for cmd in self.commands) + "}"


@dataclass(frozen=True)
class Array:
    TAG: ClassVar[ValueTag] = ValueTag.ARRAY
    values: Tuple["Value", ...] = ()

    def __str__(self) -> str:
        return "[" + " ".join(str(val) for val in self.values) + "]"


Value = Union[Nil, Number, String, Boolean, Function, Array]
VALUE_TYPES = (Nil, Number, String, Boolean, Function, Array)


@dataclass(frozen=True)
class Command:
    opcode: Opcode
    operand: Optional[Value] = None
    register: Optional[int] = None

    def __post_init__(self):
        if self.opcode in OPERAND_OPCODES:
            if not isinstance(self.operand, VALUE_TYPES):
                raise ValueError(f"{self.opcode.keyword} requires a value operand")
        elif self.operand is not None:
            raise ValueError(f"{self.opcode.keyword} takes no operand")

        if self.opcode is Opcode.ILOAD:
            reg = self.register
            if isinstance(reg, bool) or not isinstance(reg, int):
                raise ValueError(f"Register must be an integer, got {reg!r}")
            if not 0 <= reg < REGISTER_COUNT:
                raise ValueError(
                    f"Register {reg} out of range [0, {REGISTER_COUNT})"
                )
        elif self.register is not None:
            raise ValueError(f"{self.opcode.keyword} takes no register")

    @classmethod
    def push(cls, value: Value) -> "Command":
        return cls(Opcode.PUSH, operand=value)

    @classmethod
    def iload(cls, register: int, value: Value) -> "Command":
        return cls(Opcode.ILOAD, operand=value, register=register)

    def __str__(self) -> str:
        if self.opcode is Opcode.PUSH:
            return f"push {self.operand}"
        if self.opcode is Opcode.ILOAD:
            return f"iload {self.register} {self.operand}"
        return self.opcode.keyword
