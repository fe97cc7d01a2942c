from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from bibkeep.core.errors import ConfigurationError

DEFAULT_ENCODING = "utf-8"
DEFAULT_OPENING = "{"
DEFAULT_EXCERPT_WIDTH = 20

CLOSING_FOR = {"{": "}", "(": ")"}


@dataclass(frozen=True)
class Settings:
    encoding: str = DEFAULT_ENCODING
    opening: str = DEFAULT_OPENING
    excerpt_width: int = DEFAULT_EXCERPT_WIDTH


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ

    encoding = env.get("BIBKEEP_ENCODING") or DEFAULT_ENCODING

    opening = env.get("BIBKEEP_OPENING") or DEFAULT_OPENING
    if opening not in CLOSING_FOR:
        raise ConfigurationError(f"BIBKEEP_OPENING must be '{{' or '(', got {opening!r}")

    width_raw = env.get("BIBKEEP_EXCERPT_WIDTH")
    if width_raw:
        try:
            excerpt_width = int(width_raw)
        except ValueError:
            raise ConfigurationError(
                f"BIBKEEP_EXCERPT_WIDTH must be an integer, got {width_raw!r}"
            ) from None
        if excerpt_width < 1:
            raise ConfigurationError("BIBKEEP_EXCERPT_WIDTH must be positive")
    else:
        excerpt_width = DEFAULT_EXCERPT_WIDTH

    return Settings(encoding=encoding, opening=opening, excerpt_width=excerpt_width)
