"""
Cursor pagination shared by list operations.

Cursors are opaque strings; callers must pass them back unchanged. Internally
a cursor encodes the offset of the next page.
"""
import base64
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel

from vault.config import settings
from vault.core.errors import ValidationError

T = TypeVar("T")

_PREFIX = "o:"


class Page(BaseModel, Generic[T]):
    page: List[T]
    is_done: bool
    continue_cursor: Optional[str] = None


def encode_cursor(offset: int) -> str:
    return base64.urlsafe_b64encode(f"{_PREFIX}{offset}".encode()).decode()


def decode_cursor(cursor: Optional[str]) -> int:
    if not cursor:
        return 0
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Invalid cursor")
    if not raw.startswith(_PREFIX) or not raw[len(_PREFIX):].isdigit():
        raise ValidationError("Invalid cursor")
    return int(raw[len(_PREFIX):])


def clamp_page_size(page_size: Optional[int]) -> int:
    if not page_size or page_size < 1:
        return settings.default_page_size
    return min(page_size, settings.max_page_size)


def page_window(cursor: Optional[str], page_size: Optional[int]) -> Tuple[int, int]:
    """Return (offset, size) for a request."""
    return decode_cursor(cursor), clamp_page_size(page_size)


def build_page(rows: List[Dict[str, Any]], offset: int, size: int) -> Dict[str, Any]:
    """rows must hold the requested window plus at most one look-ahead row."""
    is_done = len(rows) <= size
    return {
        "page": rows[:size],
        "is_done": is_done,
        "continue_cursor": None if is_done else encode_cursor(offset + size),
    }


def paginate_rows(rows: List[Dict[str, Any]], cursor: Optional[str], page_size: Optional[int]) -> Dict[str, Any]:
    offset, size = page_window(cursor, page_size)
    return build_page(rows[offset:offset + size + 1], offset, size)


def paginate_query(query, cursor: Optional[str], page_size: Optional[int]) -> Dict[str, Any]:
    """Run an ordered PostgREST query for one page (fetches one extra row to detect the end)."""
    offset, size = page_window(cursor, page_size)
    result = query.range(offset, offset + size).execute()
    return build_page(result.data or [], offset, size)
