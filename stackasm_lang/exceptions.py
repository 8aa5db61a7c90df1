class StackAsmError(Exception):
    """Base exception for the assembler."""

    def __init__(self, message: str, location=None):
        super().__init__(message)
        self.location = location


class LexError(StackAsmError):
    """Raised when source text cannot be tokenized."""

    pass


class ParseError(StackAsmError):
    """Raised when a token stream matches no production."""

    pass


class NumberFormatError(ParseError):
    """Raised when a numeric literal cannot be converted to a float."""

    pass


class DecodeError(StackAsmError):
    """Raised when a bytecode buffer is malformed."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at byte offset {offset}")
        self.offset = offset


class ConfigError(StackAsmError, ValueError):
    """Raised when an environment setting has an invalid value."""

    pass
