from datetime import datetime, timezone
from typing import Optional

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def to_utc_iso(dt: Optional[datetime]) -> Optional[str]:
    if not dt:
        return None

    # Treat naive DB values as UTC (SQLite drops tzinfo)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc).isoformat()
