import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class AssemblerConfig:
    max_depth: int = 256
    strict_words: bool = False

    @classmethod
    def default(cls) -> "AssemblerConfig":
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AssemblerConfig":
        env = os.environ if environ is None else environ
        defaults = cls()

        raw_depth = env.get("STACKASM_MAX_DEPTH")
        max_depth = defaults.max_depth
        if raw_depth is not None:
            try:
                max_depth = int(raw_depth)
            except ValueError:
                raise ConfigError(
                    f"STACKASM_MAX_DEPTH must be an integer, got {raw_depth!r}"
                ) from None
            if max_depth < 1:
                raise ConfigError(f"STACKASM_MAX_DEPTH must be positive, got {max_depth}")

        raw_strict = env.get("STACKASM_STRICT_WORDS")
        strict_words = defaults.strict_words
        if raw_strict is not None:
            flag = raw_strict.strip().lower()
            if flag in _TRUTHY:
                strict_words = True
            elif flag in _FALSY:
                strict_words = False
            else:
                raise ConfigError(
                    f"STACKASM_STRICT_WORDS must be a boolean flag, got {raw_strict!r}"
                )

        return cls(max_depth=max_depth, strict_words=strict_words)


def resolve(config: Optional[AssemblerConfig]) -> AssemblerConfig:
    # The environment is only consulted by the command-line entry point.
    return config if config is not None else AssemblerConfig.default()
