import logging
import struct
from typing import Iterable

from .models import Array, Boolean, Command, Function, Nil, Number, Opcode, String, Value

logger = logging.getLogger(__name__)

_F64 = struct.Struct("<d")
_U64 = struct.Struct("<Q")


def _write_value(out: bytearray, value: Value) -> None:
    out.append(int(value.TAG))
    if isinstance(value, Nil):
        return
    if isinstance(value, Number):
        out += _F64.pack(value.value)
    elif isinstance(value, String):
        raw = value.value.encode("utf-8")
        out += _U64.pack(len(raw))
        out += raw
    elif isinstance(value, Boolean):
        out.append(1 if value.value else 0)
    elif isinstance(value, Function):
        out += _U64.pack(len(value.commands))
        _write_commands(out, value.commands)
    elif isinstance(value, Array):
        out += _U64.pack(len(value.values))
        for element in value.values:
            _write_value(out, element)
    else:
        raise TypeError(f"Cannot encode {type(value).__name__}")


def _write_commands(out: bytearray, commands: Iterable[Command]) -> None:
    for command in commands:
        out.append(int(command.opcode))
        if command.opcode is Opcode.PUSH:
            _write_value(out, command.operand)
        elif command.opcode is Opcode.ILOAD:
            out.append(command.register)
            _write_value(out, command.operand)


def encode_value(value: Value) -> bytes:
    out = bytearray()
    _write_value(out, value)
    return bytes(out)


def encode(commands: Iterable[Command]) -> bytes:
    """Serialize commands depth-first: one tag byte, then the payload.

    Numbers are little-endian doubles; lengths and counts are little-endian
    u64; function bodies carry a command count, not a byte length.
    """
    out = bytearray()
    _write_commands(out, commands)
    logger.debug("Encoded %d bytes", len(out))
    return bytes(out)
