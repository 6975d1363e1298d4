"""
Repositories package — data-access layer.

Each repository file handles all DB operations for one table.
Repositories do NOT handle HTTP concerns or business logic beyond
basic data integrity.

Convention:
    - One file per table (dispatch_files.py, intermediate_results.py)
    - All functions accept `AsyncSession` as the first argument
    - Use `flush()` internally; the session commit/rollback is handled
      by the caller (`get_db` dependency or the task runner)
"""
