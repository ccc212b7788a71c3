import json
from datetime import datetime
from typing import Any


def to_iso(value) -> str | None:
    # Supabase returns either an ISO string or a datetime
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def parse_json_field(value: Any) -> Any:
    """JSON columns can come back already decoded or as raw text."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return None
    return value
