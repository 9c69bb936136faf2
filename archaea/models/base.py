# archaea/models/base.py
"""
Conversion helpers used at the boundary between raw database rows and the
typed models. psycopg2 hands back Decimal for NUMERIC columns and strings
for COUNT(*) in some views; nothing past from_db_row should see either.
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Optional


def to_float(value: Any) -> Optional[float]:
    """Float or None; empty strings count as missing"""
    if value is None or value == '':
        return None
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    return float(str(value).strip())


def to_int(value: Any) -> Optional[int]:
    """Int or None; accepts '12', 12.0, Decimal('12')"""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        return int(value)
    return int(float(str(value).strip()))


def to_count(value: Any) -> int:
    """Like to_int but missing counts are zero"""
    parsed = to_int(value)
    return parsed if parsed is not None else 0


def to_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return bool(value)
    text = str(value).strip().lower()
    if text in ('t', 'true', 'yes', 'y', '1'):
        return True
    if text in ('f', 'false', 'no', 'n', '0'):
        return False
    return None


def to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def isoformat(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)
