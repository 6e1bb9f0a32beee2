"""One-line structured log records for the debug redactor."""

import logging
import re
from typing import Any

from hunyuan_sdk.exceptions import ConfigError

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# C0 controls and DEL. A logged response body must not be able to start a new line
# or carry terminal escapes.
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def _escape(value: str) -> str:
    return _CONTROL_RE.sub(lambda m: repr(m.group())[1:-1], value)


def level_number(level_name: str) -> int:
    """Map a level name such as ``"DEBUG"`` to its logging constant.

    Raises:
        ConfigError: If the name is not a standard Python level.
    """
    if level_name not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log_level {level_name!r}; expected one of {sorted(VALID_LOG_LEVELS)}"
        )
    return getattr(logging, level_name)


def log_structured(
    logger: logging.Logger,
    level: int,
    label: str,
    **fields: Any,
) -> None:
    """Emit ``label | key=value ...`` as a single line.

    None values are skipped and string values have control characters escaped.
    """
    if not logger.isEnabledFor(level):
        return
    rendered = " ".join(
        f"{key}={_escape(value) if isinstance(value, str) else value}"
        for key, value in fields.items()
        if value is not None
    )
    logger.log(level, "%s | %s", label, rendered)
