from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp for created/updated columns."""
    return datetime.now(timezone.utc)
