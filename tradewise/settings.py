"""Environment-driven parser settings.

TRADEWISE_LINE_SHAPES       "all" (default) or "first"
TRADEWISE_MIN_PIPE_TOKENS   minimum tokens for a pipe-shaped line (10)
TRADEWISE_MIN_COMMA_TOKENS  minimum tokens for a comma-shaped line (8)
TRADEWISE_LOG_LEVEL         CLI log level (INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

LINE_SHAPES_ALL = "all"
LINE_SHAPES_FIRST = "first"
_LINE_SHAPE_MODES = (LINE_SHAPES_ALL, LINE_SHAPES_FIRST)


@dataclass(frozen=True)
class ParserSettings:
    # "all": every line shape runs on every line and all matches are kept.
    # "first": stop at the first shape that emits a record for the line.
    line_shapes: str = LINE_SHAPES_ALL
    min_pipe_tokens: int = 10
    min_comma_tokens: int = 8
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.line_shapes not in _LINE_SHAPE_MODES:
            raise ValueError(
                f"line_shapes must be one of {_LINE_SHAPE_MODES}, got {self.line_shapes!r}"
            )

    @classmethod
    def from_env(cls) -> "ParserSettings":
        """Read settings from TRADEWISE_* env vars, falling back to defaults."""
        defaults = cls()

        line_shapes = os.environ.get("TRADEWISE_LINE_SHAPES", defaults.line_shapes).strip().lower()
        if line_shapes not in _LINE_SHAPE_MODES:
            logger.warning(
                "[Settings] Ignoring TRADEWISE_LINE_SHAPES=%r (expected one of %s)",
                line_shapes, _LINE_SHAPE_MODES,
            )
            line_shapes = defaults.line_shapes

        return cls(
            line_shapes=line_shapes,
            min_pipe_tokens=_env_int("TRADEWISE_MIN_PIPE_TOKENS", defaults.min_pipe_tokens),
            min_comma_tokens=_env_int("TRADEWISE_MIN_COMMA_TOKENS", defaults.min_comma_tokens),
            log_level=os.environ.get("TRADEWISE_LOG_LEVEL", defaults.log_level).strip().upper(),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[Settings] Ignoring %s=%r (not an integer)", name, raw)
        return default
    if value < 1:
        logger.warning("[Settings] Ignoring %s=%r (must be positive)", name, raw)
        return default
    return value
