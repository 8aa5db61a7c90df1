from dataclasses import dataclass
from enum import Enum
from typing import Dict


@dataclass(frozen=True)
class Location:
    line: int
    column: int
    source: str

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column} in {self.source}"


class TokenKind(Enum):
    EOF = "end-of-file"
    NIL = "nil"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    LEFT_SQUARE = "["
    RIGHT_SQUARE = "]"
    LEFT_CURLY = "{"
    RIGHT_CURLY = "}"
    PUSH = "push"
    DUP = "dup"
    SWAP = "swap"
    ILOAD = "iload"
    LOAD = "load"
    DROP = "drop"
    QUERY = "query"
    INFO = "info"
    IF = "if"
    EACH = "each"
    REDUCE = "reduce"
    REVERSE = "reverse"
    MAP = "map"
    FILTER = "filter"
    CALL = "call"
    TOSTR = "tostr"
    TONUM = "tonum"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EQ = "="
    NOT_EQ = "!="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    AND = "and"
    OR = "or"
    NOT = "not"
    CONCAT = "concat"
    MATCH = "match"
    SPLIT = "split"
    IOTA = "iota"

    def __str__(self) -> str:
        return f"`{self.value}`"


BRACKETS: Dict[str, TokenKind] = {
    "[": TokenKind.LEFT_SQUARE,
    "]": TokenKind.RIGHT_SQUARE,
    "{": TokenKind.LEFT_CURLY,
    "}": TokenKind.RIGHT_CURLY,
}

# Literal words and opcode keywords recognised by the word scanner.
KEYWORDS: Dict[str, TokenKind] = {
    "nil": TokenKind.NIL,
    "true": TokenKind.BOOLEAN,
    "false": TokenKind.BOOLEAN,
}
KEYWORDS.update(
    {
        kind.value: kind
        for kind in TokenKind
        if kind
        not in (
            TokenKind.EOF,
            TokenKind.NIL,
            TokenKind.NUMBER,
            TokenKind.STRING,
            TokenKind.BOOLEAN,
        )
        and kind.value not in BRACKETS
    }
)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    location: Location
    text: str = ""

    @property
    def display(self) -> str:
        if self.kind is TokenKind.STRING:
            return f'"{self.text}"'
        if self.kind in (TokenKind.NUMBER, TokenKind.BOOLEAN):
            return f"`{self.text}`"
        return str(self.kind)

    def __str__(self) -> str:
        return f"{self.display} at {self.location}"
