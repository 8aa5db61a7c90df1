import logging
from typing import List, Optional

from .config import AssemblerConfig, resolve
from .exceptions import LexError
from .tokens import BRACKETS, KEYWORDS, Location, Token, TokenKind

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")
LINE_BREAKS = ("\r", "\n")


class Scanner:
    """Character cursor over source text that tracks line and column.

    Every consumed character advances the column by one; every line break
    (CR, LF or CRLF) increments the line and resets the column to 1.
    """

    def __init__(self, text: str, source: str):
        self.text = text
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        return self.text[idx] if idx < len(self.text) else ""

    def here(self) -> Location:
        return Location(self.line, self.column, self.source)

    def advance(self) -> str:
        c = self.text[self.pos]
        self.pos += 1
        if c == "\r":
            if self.peek() == "\n":
                self.pos += 1
            self._newline()
        elif c == "\n":
            self._newline()
        else:
            self.column += 1
        return c

    def _newline(self) -> None:
        self.line += 1
        self.column = 1

    def skip_line(self) -> None:
        while not self.at_end() and self.peek() not in LINE_BREAKS:
            self.advance()


def _is_word_char(c: str) -> bool:
    return bool(c) and not c.isspace() and c != '"' and c not in BRACKETS


def _scan_number(sc: Scanner) -> Token:
    start = sc.here()
    begin = sc.pos
    if sc.peek() == "-":
        sc.advance()
    seen_dot = False
    if sc.peek() == ".":
        seen_dot = True
        sc.advance()
    while True:
        c = sc.peek()
        if c in DIGITS:
            sc.advance()
        elif c == "." and not seen_dot:
            seen_dot = True
            sc.advance()
        else:
            break
    return Token(TokenKind.NUMBER, start, sc.text[begin : sc.pos])


def _scan_string(sc: Scanner) -> Token:
    start = sc.here()
    sc.advance()
    begin = sc.pos
    while not sc.at_end() and sc.peek() != '"':
        sc.advance()
    if sc.at_end():
        raise LexError(f"Unterminated string starting on {start}", start)
    text = sc.text[begin : sc.pos]
    sc.advance()
    return Token(TokenKind.STRING, start, text)


def _scan_word(sc: Scanner, strict: bool) -> Optional[Token]:
    start = sc.here()
    begin = sc.pos
    sc.advance()
    while _is_word_char(sc.peek()):
        sc.advance()
    word = sc.text[begin : sc.pos]
    kind = KEYWORDS.get(word)
    if kind is None:
        if strict:
            raise LexError(f"Unknown word `{word}` on {start}", start)
        logger.warning("Dropping unknown word %r at %s", word, start)
        return None
    return Token(kind, start, word)


def tokenize(
    text: str, source_name: str, config: Optional[AssemblerConfig] = None
) -> List[Token]:
    """Scan ``text`` into tokens terminated by a single EOF token.

    Raises LexError for an unterminated string literal, and for unknown
    words when ``strict_words`` is enabled.
    """
    cfg = resolve(config)
    sc = Scanner(text, source_name)
    tokens: List[Token] = []

    if text.startswith("#!"):
        sc.skip_line()

    while not sc.at_end():
        c = sc.peek()
        if c.isspace():
            sc.advance()
        elif c == ";":
            sc.skip_line()
        elif c in BRACKETS:
            tokens.append(Token(BRACKETS[c], sc.here(), c))
            sc.advance()
        elif c in DIGITS or c == ".":
            tokens.append(_scan_number(sc))
        elif c == "-" and (sc.peek(1) in DIGITS or sc.peek(1) == "."):
            tokens.append(_scan_number(sc))
        elif c == '"':
            tokens.append(_scan_string(sc))
        else:
            token = _scan_word(sc, cfg.strict_words)
            if token is not None:
                tokens.append(token)

    tokens.append(Token(TokenKind.EOF, sc.here()))
    logger.debug("Lexed %d tokens from %s", len(tokens), source_name)
    return tokens
