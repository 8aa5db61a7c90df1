import struct
import unittest

from stackasm_lang import (
    AssemblerConfig,
    Array,
    Command,
    DecodeError,
    Function,
    Number,
    Opcode,
    String,
    decode,
    decode_value,
    disassemble,
    encode,
    encode_value,
    parse,
    tokenize,
)

CONFIG = AssemblerConfig.default()


class DecoderTests(unittest.TestCase):
    def test_nested_structure_round_trip(self) -> None:
        source = 'push [1 2 [3 4]] iload 2 {push "x" push [] dup} push {push {swap}} push false'
        commands = parse(tokenize(source, "t", CONFIG), CONFIG)
        self.assertEqual(decode(encode(commands)), commands)

    def test_decode_value(self) -> None:
        value = Array((Number(1.0), String("a"), Function((Command(Opcode.CALL),))))
        self.assertEqual(decode_value(encode_value(value)), value)

    def test_trailing_bytes_after_value(self) -> None:
        with self.assertRaises(DecodeError) as ctx:
            decode_value(b"\x00\x00")
        self.assertEqual(ctx.exception.offset, 1)

    def test_truncated_number(self) -> None:
        with self.assertRaises(DecodeError) as ctx:
            decode(b"\x00\x01\x00\x00")
        self.assertEqual(ctx.exception.offset, 2)
        self.assertIn("Truncated number", str(ctx.exception))

    def test_truncated_function_body(self) -> None:
        data = b"\x00\x04" + struct.pack("<Q", 2) + b"\x01"
        with self.assertRaises(DecodeError):
            decode(data)

    def test_unknown_tags(self) -> None:
        with self.assertRaises(DecodeError) as ctx:
            decode(b"\x01\xff")
        self.assertEqual(ctx.exception.offset, 1)
        with self.assertRaises(DecodeError) as ctx:
            decode(b"\x00\x09")
        self.assertIn("Unknown value tag 0x09", str(ctx.exception))

    def test_register_out_of_range(self) -> None:
        with self.assertRaises(DecodeError) as ctx:
            decode(b"\x03\x10\x00")
        self.assertEqual(ctx.exception.offset, 1)

    def test_invalid_utf8(self) -> None:
        data = b"\x00\x02" + struct.pack("<Q", 1) + b"\xff"
        with self.assertRaises(DecodeError):
            decode(data)

    def test_disassemble_listing(self) -> None:
        data = encode(parse(tokenize("dup push 1 swap", "t", CONFIG), CONFIG))
        self.assertEqual(disassemble(data), "0000: dup\n0001: push 1\n000b: swap")


if __name__ == "__main__":
    unittest.main(verbosity=2)
