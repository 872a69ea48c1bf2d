from datetime import datetime, timezone

def utc_now() -> datetime:
    # Timestamps are always timezone-aware UTC
    return datetime.now(timezone.utc)
