"""Argument validation for per-record commands."""

from __future__ import annotations

import re

from .errors import MissingParameter, NotANumber

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)", re.ASCII)


def validate_id(raw: str | None) -> int:
    """Return the integer id at the start of `raw`.

    Anything after the leading integer is discarded, so ``"3.7"`` and
    ``"3abc"`` both give 3.
    """
    if raw is None:
        raise MissingParameter()
    match = _LEADING_INT.match(raw)
    if match is None:
        raise NotANumber(raw)
    return int(match.group(1))
