"""stackasm entrypoint module exposing the public API and CLI."""

import argparse
import dataclasses
import logging
import sys

from stackasm_lang import (
    AssemblerConfig,
    ConfigError,
    LexError,
    ParseError,
    StackAsmError,
    disassemble,
    encode,
    parse,
    tokenize,
)

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_CANTCREAT = 73
EX_CONFIG = 78

EMIT_CHOICES = ("tokens", "commands", "bytecode", "listing")


class _UsageParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}.", file=sys.stderr)
        sys.exit(EX_USAGE)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(prog="stackasm", description="Stack language assembler")
    parser.add_argument("file", nargs="?", help="Path to the program to assemble")
    parser.add_argument(
        "--emit",
        choices=EMIT_CHOICES,
        default=None,
        help="What to print: tokens (default), commands, bytecode or listing",
    )
    parser.add_argument(
        "-o", "--output", help="Write bytecode to this path (implies --emit bytecode)"
    )
    parser.add_argument(
        "--strict", action="store_true", help="Reject words that are not keywords"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log pipeline stages to stderr"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Assemble lines interactively"
    )
    return parser


def run_repl(config: AssemblerConfig):  # pragma: no cover
    print("stackasm interactive assembler")
    print("Type 'exit' to leave.")
    while True:
        try:
            text = input(">> ").strip()
        except EOFError:
            break
        if not text:
            continue
        if text in ("exit", "quit"):
            break
        try:
            commands = parse(tokenize(text, "<repl>", config), config)
        except StackAsmError as e:
            print(f"error: {e}")
            continue
        for command in commands:
            print(command)
        print("=>", encode(commands).hex(" "))


def _emit(args, source: str, config: AssemblerConfig) -> int:
    emit = args.emit or ("bytecode" if args.output else "tokens")

    try:
        tokens = tokenize(source, args.file, config)
    except LexError as e:
        print(f"Tokenizer error: {e}", file=sys.stderr)
        return EX_DATAERR

    if emit == "tokens":
        for token in tokens:
            print(token)
        return EX_OK

    try:
        commands = parse(tokens, config)
    except ParseError as e:
        print(f"Parser error: {e}", file=sys.stderr)
        return EX_DATAERR

    if emit == "commands":
        for command in commands:
            print(command)
        return EX_OK

    data = encode(commands)
    if emit == "listing":
        if data:
            print(disassemble(data, config))
        return EX_OK

    if args.output:
        try:
            with open(args.output, "wb") as f:
                f.write(data)
        except OSError:
            print(f"Output cannot be written: {args.output}", file=sys.stderr)
            return EX_CANTCREAT
    else:
        print(data.hex())
    return EX_OK


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = AssemblerConfig.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(EX_CONFIG)
    if args.strict:
        config = dataclasses.replace(config, strict_words=True)

    if args.repl:
        run_repl(config)
        return

    if not args.file:
        print("Must pass file to assemble.", file=sys.stderr)
        sys.exit(EX_USAGE)

    try:
        with open(args.file, "r", encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError):
        print(f"File cannot be read: {args.file}", file=sys.stderr)
        sys.exit(EX_NOINPUT)

    code = _emit(args, source, config)
    if code != EX_OK:
        sys.exit(code)


if __name__ == "__main__":
    main()
