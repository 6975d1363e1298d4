"""
Declarative base for the dispatch tables.

One model per module under `dispatch/db/models/`; the package
`__init__` imports them all so Alembic autogenerate sees every table.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# ─── Column defaults ───────────────────────────
def generate_uuid() -> uuid.UUID:
    return uuid.uuid4()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
