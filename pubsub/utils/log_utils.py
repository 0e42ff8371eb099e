"""Timestamped logging helpers for bus diagnostics."""

from __future__ import annotations

import builtins
import time
from typing import Any


BUS_SYSTEM = "BUS"
_LEVELS = {"DEEP", "DEBUG", "INFO", "WARN", "ERROR"}


def _split_tags(message: str) -> tuple[list[str], str]:
    tags: list[str] = []
    remaining = message.lstrip()
    while remaining.startswith("["):
        end = remaining.find("]")
        if end == -1:
            break
        tag = remaining[1:end].strip()
        if not tag:
            break
        tags.append(tag)
        remaining = remaining[end + 1 :].lstrip()
    return tags, remaining


def _format_message(message: str) -> str:
    """Render ``[SYSTEM][VARIANT] [extra] text``.

    The level tag may lead (``[WARN][BUS]``) or follow the system tag
    (``[BUS][warn]``); in both positions the variant is upper-cased.
    Untagged messages belong to the bus.
    """
    tags, remaining = _split_tags(message)
    system = BUS_SYSTEM
    variant = None
    extra_tags: list[str] = []
    if tags:
        if tags[0].upper() in _LEVELS:
            variant = tags[0]
            system = tags[1] if len(tags) > 1 else BUS_SYSTEM
        else:
            system = tags[0]
            variant = tags[1] if len(tags) > 1 else None
        extra_tags = tags[2:]
    extra = f" [{' '.join(extra_tags)}]" if extra_tags else ""
    suffix = f" {remaining}" if remaining else ""
    if variant:
        return f"[{system}][{variant.upper()}]{extra}{suffix}"
    return f"[{system}]{extra}{suffix}"


def tprint(*args: Any, **kwargs: Any) -> None:
    """Print with a timestamp prefix and normalized tag order."""
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
    message = " ".join(str(arg) for arg in args)
    builtins.print(f"[{timestamp}]{_format_message(message)}", **kwargs)


def log(system: str, message: str, variant: str | None = None) -> None:
    """Log with explicit system and optional variant."""
    if variant:
        tprint(f"[{system}][{variant}] {message}")
    else:
        tprint(f"[{system}] {message}")


def warn(message: str, system: str = BUS_SYSTEM) -> None:
    """Non-fatal notice, such as a publish nobody listens to."""
    log(system, message, "WARN")


def error(message: str, system: str = BUS_SYSTEM) -> None:
    """A failure that was caught and reported instead of raised."""
    log(system, message, "ERROR")
