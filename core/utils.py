# core/utils.py

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum


def sanitize(data: dict, drop_none: bool = False) -> dict:
    """
    Make a payload safe to send to PostgREST:
    - Empty / whitespace strings → None
    - Strip string whitespace
    - Decimal → float (numeric columns)
    - date / datetime → ISO 8601 string
    - Enum → its value
    - Optionally drop None values (inserts let the DB apply defaults)
    """
    clean = {}

    for k, v in data.items():
        # Preserve booleans before anything else touches them
        if isinstance(v, bool):
            clean[k] = v
            continue

        if isinstance(v, Enum):
            v = v.value

        if isinstance(v, str):
            v = v.strip() or None
        elif isinstance(v, Decimal):
            v = float(v)
        elif isinstance(v, (date, datetime)):
            v = v.isoformat()

        if v is None and drop_none:
            continue

        clean[k] = v

    return clean


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
