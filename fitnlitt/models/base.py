import uuid
from datetime import datetime, timezone


def new_id():
    """Supabase tables use UUID primary keys."""
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)
