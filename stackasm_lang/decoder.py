import logging
import struct
from typing import List, Optional, Tuple

from .config import AssemblerConfig, resolve
from .exceptions import DecodeError
from .models import (
    REGISTER_COUNT,
    Array,
    Boolean,
    Command,
    Function,
    Nil,
    Number,
    Opcode,
    String,
    Value,
    ValueTag,
)

logger = logging.getLogger(__name__)


class _Reader:
    def __init__(self, data: bytes, max_depth: int):
        self.data = bytes(data)
        self.pc = 0
        self.depth = 0
        self.max_depth = max_depth

    def at_end(self) -> bool:
        return self.pc >= len(self.data)

    def read_exact(self, n: int, what: str) -> bytes:
        if self.pc + n > len(self.data):
            raise DecodeError(
                f"Truncated {what}: expected {n} bytes, got {len(self.data) - self.pc}",
                self.pc,
            )
        b = self.data[self.pc : self.pc + n]
        self.pc += n
        return b

    def u8(self, what: str) -> int:
        return self.read_exact(1, what)[0]

    def u64(self, what: str) -> int:
        return struct.unpack("<Q", self.read_exact(8, what))[0]

    def f64(self) -> float:
        return struct.unpack("<d", self.read_exact(8, "number"))[0]

    def enter(self, at: int) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise DecodeError(f"Nesting too deep (limit {self.max_depth})", at)

    def leave(self) -> None:
        self.depth -= 1


def _read_value(r: _Reader) -> Value:
    at = r.pc
    tag = r.u8("value tag")
    try:
        tag = ValueTag(tag)
    except ValueError:
        raise DecodeError(f"Unknown value tag 0x{tag:02X}", at) from None

    if tag is ValueTag.NIL:
        return Nil()
    if tag is ValueTag.NUMBER:
        return Number(r.f64())
    if tag is ValueTag.STRING:
        length = r.u64("string length")
        start = r.pc
        raw = r.read_exact(length, "string")
        try:
            return String(raw.decode("utf-8"))
        except UnicodeDecodeError:
            raise DecodeError("Invalid UTF-8 in string", start) from None
    if tag is ValueTag.BOOLEAN:
        flag_at = r.pc
        flag = r.u8("boolean")
        if flag > 1:
            raise DecodeError(f"Invalid boolean byte 0x{flag:02X}", flag_at)
        return Boolean(flag == 1)

    r.enter(at)
    if tag is ValueTag.FUNCTION:
        count = r.u64("function length")
        value = Function(tuple(_read_command(r) for _ in range(count)))
    else:
        count = r.u64("array length")
        value = Array(tuple(_read_value(r) for _ in range(count)))
    r.leave()
    return value


def _read_command(r: _Reader) -> Command:
    at = r.pc
    op = r.u8("opcode")
    try:
        op = Opcode(op)
    except ValueError:
        raise DecodeError(f"Unknown opcode 0x{op:02X}", at) from None

    if op is Opcode.PUSH:
        return Command.push(_read_value(r))
    if op is Opcode.ILOAD:
        reg_at = r.pc
        reg = r.u8("register")
        if reg >= REGISTER_COUNT:
            raise DecodeError(f"Register {reg} out of range", reg_at)
        return Command.iload(reg, _read_value(r))
    return Command(op)


def _read_program(data: bytes, config: AssemblerConfig) -> List[Tuple[int, Command]]:
    r = _Reader(data, config.max_depth)
    listing = []
    while not r.at_end():
        at = r.pc
        listing.append((at, _read_command(r)))
    return listing


def decode(data: bytes, config: Optional[AssemblerConfig] = None) -> List[Command]:
    """Decode a bytecode buffer back into the command sequence it encodes.

    Function and array nesting deeper than ``max_depth`` raises DecodeError,
    the same limit the parser applies to source text.
    """
    commands = [cmd for _, cmd in _read_program(data, resolve(config))]
    logger.debug("Decoded %d top-level commands from %d bytes", len(commands), len(data))
    return commands


def decode_value(data: bytes, config: Optional[AssemblerConfig] = None) -> Value:
    r = _Reader(data, resolve(config).max_depth)
    value = _read_value(r)
    if not r.at_end():
        raise DecodeError("Trailing bytes after value", r.pc)
    return value


def disassemble(data: bytes, config: Optional[AssemblerConfig] = None) -> str:
    return "\n".join(f"{at:04x}: {cmd}" for at, cmd in _read_program(data, resolve(config)))
