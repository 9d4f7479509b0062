"""SQL text helpers.

Queries are written with ``?`` positional placeholders. For drivers using
the ``format`` paramstyle (MySQL) they are converted to ``%s``; string
literals are left untouched.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")

_LIMIT_CLAUSE = " LIMIT 1"


def ensure_limit(sql: str) -> str:
    """Append ``LIMIT 1`` unless the query text already mentions LIMIT.

    This is a case-insensitive substring check, not SQL parsing: a LIMIT
    inside a string literal or a subquery also counts as present.
    """
    if "LIMIT" in sql.upper():
        return sql
    return sql.rstrip().rstrip(";").rstrip() + _LIMIT_CLAUSE


def normalize_placeholders(sql: str, paramstyle: str) -> str:
    """Convert ``?`` placeholders to the target param style.

    Args:
        sql: SQL string with ``?`` placeholders.
        paramstyle: Target style - 'qmark' (no conversion) or 'format' (%s).

    Returns:
        SQL with placeholders converted to the target style.
    """
    if paramstyle == "qmark":
        return sql
    if paramstyle != "format":
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")
    return _convert_to_format(sql)


def _convert_segment(segment: str) -> str:
    return segment.replace("%", "%%").replace("?", "%s")


@lru_cache(maxsize=256)
def _convert_to_format(sql: str) -> str:
    """Convert ? to %s and escape literal %, preserving string literals."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_convert_segment(sql[last_end:start]))
        # Literal % still has to be doubled for the driver's % formatting
        parts.append(match.group().replace("%", "%%"))
        last_end = end

    if last_end < len(sql):
        parts.append(_convert_segment(sql[last_end:]))

    return "".join(parts)
