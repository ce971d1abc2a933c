"""Default identifier and time sources injected into the services."""

from datetime import datetime
import uuid


def generate_record_id() -> str:
    """Return a fresh random record identifier."""
    return str(uuid.uuid4())


def current_time() -> datetime:
    return datetime.now()
