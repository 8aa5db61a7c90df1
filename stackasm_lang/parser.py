import functools
import logging
from typing import List, Optional, Sequence

from lark import Lark, Token as LarkToken, Transformer_NonRecursive
from lark.exceptions import UnexpectedToken, VisitError
from lark.lexer import Lexer

from .config import AssemblerConfig, resolve
from .exceptions import NumberFormatError, ParseError, StackAsmError
from .grammar import STACK_GRAMMAR
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
)
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)

OPENERS = frozenset({TokenKind.LEFT_SQUARE, TokenKind.LEFT_CURLY})
CLOSERS = frozenset({TokenKind.RIGHT_SQUARE, TokenKind.RIGHT_CURLY})


class TokenStreamLexer(Lexer):
    """Passes already-scanned lark tokens through to the parser."""

    def __init__(self, lexer_conf):
        pass

    def lex(self, data):
        yield from data


@functools.lru_cache(maxsize=None)
def _grammar_parser() -> Lark:
    return Lark(STACK_GRAMMAR, parser="lalr", lexer=TokenStreamLexer)


def _to_lark(token: Token, index: int) -> LarkToken:
    # start_pos carries the index back into the scanned token list.
    name = "$END" if token.kind is TokenKind.EOF else token.kind.name
    return LarkToken(
        name,
        token.text,
        start_pos=index,
        line=token.location.line,
        column=token.location.column,
    )


def _describe_expected(names) -> str:
    kinds = []
    for name in names:
        if name == "$END":
            kinds.append(TokenKind.EOF)
        elif name in TokenKind.__members__:
            kinds.append(TokenKind[name])
    order = list(TokenKind)
    kinds.sort(key=order.index)
    return ", ".join(str(kind) for kind in kinds) or "nothing"


class CommandBuilder(Transformer_NonRecursive):
    """Turns the lark parse tree into Command and Value objects.

    The tree is walked iteratively, so nesting depth is bounded only by
    ``max_depth`` and not by the interpreter recursion limit.
    """

    def __init__(self, tokens: Sequence[Token]):
        super().__init__()
        self._tokens = tokens

    def _origin(self, tok: LarkToken) -> Token:
        return self._tokens[tok.start_pos]

    def _to_float(self, tok: LarkToken) -> float:
        try:
            return float(str(tok))
        except ValueError:
            loc = self._origin(tok).location
            raise NumberFormatError(
                f"Failed to parse number `{tok}` on {loc}", loc
            ) from None

    # --- Program ---

    def start(self, items):
        return list(items)

    # --- Commands ---

    def push(self, items):
        return Command.push(items[1])

    def iload(self, items):
        _, reg_tok, value = items
        reg = self._to_float(reg_tok)
        if not reg.is_integer() or not 0 <= reg < REGISTER_COUNT:
            loc = self._origin(reg_tok).location
            raise ParseError(
                f"Register must be an integer in [0, {REGISTER_COUNT}), "
                f"got `{reg_tok}` on {loc}",
                loc,
            )
        return Command.iload(int(reg), value)

    def opcode(self, items):
        return Command(Opcode[items[0].type])

    # --- Values ---

    def number(self, items):
        return Number(self._to_float(items[0]))

    def string(self, items):
        return String(str(items[0]))

    def boolean(self, items):
        return Boolean(items[0] == "true")

    def nil(self, items):
        return Nil()

    def array(self, items):
        return Array(tuple(items[1:-1]))

    def function(self, items):
        return Function(tuple(items[1:-1]))


def parse(
    tokens: Sequence[Token], config: Optional[AssemblerConfig] = None
) -> List[Command]:
    """Parse a token sequence ending in an EOF token into commands.

    Tokens are fed to the LALR parser one at a time; the first token that
    fits no production raises ParseError.
    """
    cfg = resolve(config)
    interactive = _grammar_parser().parse_interactive("")
    depth = 0
    tree = None

    for index, token in enumerate(tokens):
        try:
            result = interactive.feed_token(_to_lark(token, index))
        except UnexpectedToken as e:
            raise ParseError(
                f"Unexpected token: expected {_describe_expected(e.expected)}, "
                f"got {token.display} on {token.location}",
                token.location,
            ) from None

        if token.kind is TokenKind.EOF:
            tree = result
            break
        if token.kind in OPENERS:
            depth += 1
            if depth > cfg.max_depth:
                raise ParseError(
                    f"Nesting too deep (limit {cfg.max_depth}) on {token.location}",
                    token.location,
                )
        elif token.kind in CLOSERS:
            depth -= 1

    if tree is None:
        raise ParseError("Token stream is not terminated by an end-of-file token")

    try:
        commands = CommandBuilder(tokens).transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, StackAsmError):
            raise e.orig_exc from None
        raise

    logger.debug("Parsed %d top-level commands", len(commands))
    return commands
