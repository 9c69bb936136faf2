"""
Pagination and allow-listed sorting for the list queries.

Sort columns are never taken from the caller: a public sort key is looked up
in a fixed mapping to an ORDER BY fragment written in code.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Any, List


@dataclass(frozen=True)
class Page:
    """Validated limit/offset pair"""
    limit: int = 50
    offset: int = 0


def parse_pagination(limit: Any = None, offset: Any = None,
                     default_limit: int = 50, max_limit: int = 200) -> Page:
    """Clamp limit to [1, max_limit] and offset to >= 0

    Unparseable values fall back to the defaults.
    """
    try:
        parsed_limit = int(limit) if limit not in (None, '') else default_limit
    except (TypeError, ValueError):
        parsed_limit = default_limit
    try:
        parsed_offset = int(offset) if offset not in (None, '') else 0
    except (TypeError, ValueError):
        parsed_offset = 0
    return Page(limit=min(max(1, parsed_limit), max_limit), offset=max(0, parsed_offset))


@dataclass(frozen=True)
class SortSpec:
    """Resolved ORDER BY clause for a public sort key"""
    key: str
    descending: bool
    clause: str


class SortOptions:
    """Allow-list of sort keys for one listing

    Each entry maps a public key to a column expression. ``tiebreak`` is
    appended after the primary column for every key. Unknown keys fall back
    to the default key and order without raising.
    """

    def __init__(self, columns: Dict[str, str], default_key: str,
                 default_descending: bool = False, tiebreak: Optional[str] = None,
                 overrides: Optional[Dict[str, str]] = None):
        if default_key not in columns:
            raise ValueError(f"Default sort key {default_key!r} is not in the allow-list")
        self.columns = dict(columns)
        self.default_key = default_key
        self.default_descending = default_descending
        self.tiebreak = tiebreak
        # Full ORDER BY templates with a {direction} placeholder
        self.overrides = dict(overrides or {})

    @property
    def keys(self) -> List[str]:
        return list(self.columns)

    def resolve(self, key: Optional[str] = None, order: Optional[str] = None) -> SortSpec:
        if key in self.columns:
            sort_key = key
            if order is None:
                descending = self.default_descending
            else:
                descending = str(order).upper() == 'DESC'
        else:
            sort_key = self.default_key
            descending = self.default_descending

        direction = 'DESC' if descending else 'ASC'
        if sort_key in self.overrides:
            clause = self.overrides[sort_key].format(direction=direction)
        else:
            clause = f"{self.columns[sort_key]} {direction} NULLS LAST"
            if self.tiebreak:
                clause += f", {self.tiebreak}"
        return SortSpec(key=sort_key, descending=descending, clause=clause)


def like_pattern(text: str) -> str:
    """Substring pattern for ILIKE with the LIKE wildcards escaped"""
    escaped = text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"
