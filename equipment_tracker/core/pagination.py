"""Page/limit handling for list endpoints.

Query strings are untrusted, so ``normalize`` accepts anything and always
returns bounded integers. ``normalize`` is a fixed point on its own output.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Largest OFFSET a 64-bit SQL integer can hold.
MAX_OFFSET = 2**63 - 1
_ASCII_DIGITS = "0123456789"


class PageRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int
    limit: int


class PageMeta(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: int
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")


def _to_int(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    text = str(raw).strip()
    try:
        return int(text)
    except ValueError:
        # Also raised past the interpreter's int-string digit limit.
        pass
    # "12abc" style input keeps its leading integer, like parseInt does.
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if char not in _ASCII_DIGITS:
            break
        digits += char
    if not digits:
        return None
    try:
        return sign * int(digits)
    except ValueError:
        return None


def normalize(
    raw_page: Any = None,
    raw_limit: Any = None,
    max_limit: int = MAX_LIMIT,
    default_limit: int = DEFAULT_LIMIT,
) -> PageRequest:
    page = _to_int(raw_page)
    limit = _to_int(raw_limit)
    page = max(1, 1 if page is None else page)
    limit = default_limit if limit is None else limit
    limit = min(max_limit, max(1, limit))
    page = min(page, MAX_OFFSET // limit)
    return PageRequest(page=page, limit=limit)


def offset(page: int, limit: int) -> int:
    return max(0, (page - 1) * limit)


def describe(total: int, page: int, limit: int) -> PageMeta:
    total_pages = math.ceil(total / limit) if total > 0 and limit > 0 else 0
    return PageMeta(total=total, page=page, limit=limit, total_pages=total_pages)


__all__ = ["DEFAULT_LIMIT", "MAX_LIMIT", "MAX_OFFSET", "PageMeta", "PageRequest", "describe", "normalize", "offset"]
