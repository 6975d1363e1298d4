"""
Models package — re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `dispatch/db/models/<table_name>.py`
    2. Import it here
"""

from dispatch.db.models.base import Base
from dispatch.db.models.dispatch_file import DispatchFile
from dispatch.db.models.intermediate_result import IntermediateResult

__all__ = [
    "Base",
    "DispatchFile",
    "IntermediateResult",
]
