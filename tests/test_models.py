import os
import unittest
from unittest.mock import patch

from stackasm_lang import (
    AssemblerConfig,
    Array,
    Boolean,
    Command,
    ConfigError,
    Function,
    Nil,
    Number,
    Opcode,
    String,
    StackAsmError,
    assemble,
    parse,
    tokenize,
)


class CommandModelTests(unittest.TestCase):
    def test_register_invariant(self) -> None:
        self.assertEqual(Command.iload(0, Nil()).register, 0)
        self.assertEqual(Command.iload(15, Nil()).register, 15)
        for reg in (-1, 16, 1.0, True):
            with self.subTest(reg=reg):
                with self.assertRaises(ValueError):
                    Command.iload(reg, Nil())

    def test_operand_shape(self) -> None:
        with self.assertRaises(ValueError):
            Command(Opcode.PUSH)
        with self.assertRaises(ValueError):
            Command(Opcode.DUP, operand=Nil())
        with self.assertRaises(ValueError):
            Command(Opcode.DUP, register=1)

    def test_display(self) -> None:
        self.assertEqual(str(Number(1.0)), "1")
        self.assertEqual(str(Number(-0.0)), "-0")
        self.assertEqual(str(Number(0.125)), "0.125")
        self.assertEqual(str(Number(1e-07)), "0.0000001")
        self.assertEqual(str(Number(-2.5e-05)), "-0.000025")
        self.assertEqual(str(String("a b")), '"a b"')
        self.assertEqual(str(Boolean(False)), "false")
        self.assertEqual(str(Nil()), "nil")
        self.assertEqual(str(Array((Number(1.0), Array()))), "[1 []]")
        self.assertEqual(
            str(Function((Command(Opcode.GREATER_EQ), Command.push(Nil())))),
            "{>= push nil}",
        )
        self.assertEqual(str(Command.iload(4, Function())), "iload 4 {}")

    def test_values_compare_structurally(self) -> None:
        self.assertEqual(Array((Number(1.0),)), Array((Number(1.0),)))
        self.assertNotEqual(Number(1.0), Boolean(True))
        self.assertEqual(Nil(), Nil())


class ConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = AssemblerConfig.from_env({})
        self.assertEqual(cfg, AssemblerConfig.default())
        self.assertFalse(cfg.strict_words)

    def test_env_overrides(self) -> None:
        cfg = AssemblerConfig.from_env(
            {"STACKASM_MAX_DEPTH": "12", "STACKASM_STRICT_WORDS": "Yes"}
        )
        self.assertEqual(cfg.max_depth, 12)
        self.assertTrue(cfg.strict_words)

    def test_invalid_env_values(self) -> None:
        for env in (
            {"STACKASM_MAX_DEPTH": "deep"},
            {"STACKASM_MAX_DEPTH": "0"},
            {"STACKASM_STRICT_WORDS": "maybe"},
        ):
            with self.subTest(env=env):
                with self.assertRaises(ConfigError) as ctx:
                    AssemblerConfig.from_env(env)
                self.assertIn(next(iter(env)), str(ctx.exception))

    def test_config_error_is_an_assembler_error(self) -> None:
        self.assertTrue(issubclass(ConfigError, StackAsmError))

    def test_library_calls_ignore_the_environment(self) -> None:
        bad = {"STACKASM_MAX_DEPTH": "x", "STACKASM_STRICT_WORDS": "maybe"}
        with patch.dict(os.environ, bad):
            tokens = tokenize("dup bogus", "t")
            self.assertEqual(parse(tokens), [Command(Opcode.DUP)])
            self.assertEqual(assemble("dup"), b"\x01")


if __name__ == "__main__":
    unittest.main(verbosity=2)
