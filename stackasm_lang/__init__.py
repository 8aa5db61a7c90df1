from typing import Optional

from .grammar import STACK_GRAMMAR
from .exceptions import (
    StackAsmError,
    LexError,
    ParseError,
    NumberFormatError,
    DecodeError,
    ConfigError,
)
from .config import AssemblerConfig, resolve
from .tokens import Location, Token, TokenKind, KEYWORDS
from .models import (
    ValueTag,
    Opcode,
    Nil,
    Number,
    String,
    Boolean,
    Function,
    Array,
    Value,
    Command,
)
from .lexer import tokenize
from .parser import parse
from .encoder import encode, encode_value
from .decoder import decode, decode_value, disassemble


def assemble(
    text: str, source_name: str = "<input>", config: Optional[AssemblerConfig] = None
) -> bytes:
    """Lex, parse and encode ``text``; the first error aborts the pipeline."""
    cfg = resolve(config)
    return encode(parse(tokenize(text, source_name, cfg), cfg))


__all__ = [
    "STACK_GRAMMAR",
    "StackAsmError",
    "LexError",
    "ParseError",
    "NumberFormatError",
    "DecodeError",
    "ConfigError",
    "AssemblerConfig",
    "Location",
    "Token",
    "TokenKind",
    "KEYWORDS",
    "ValueTag",
    "Opcode",
    "Nil",
    "Number",
    "String",
    "Boolean",
    "Function",
    "Array",
    "Value",
    "Command",
    "tokenize",
    "parse",
    "encode",
    "encode_value",
    "decode",
    "decode_value",
    "disassemble",
    "assemble",
]
