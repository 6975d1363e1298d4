"""
Dispatch processing pipeline.

One invocation processes one dispatch file (or one chunk of a LETTURE
archive) through a file-type specific sequence of steps, under a
wall-clock deadline, and persists exactly one intermediate result row.

Entry point: `dispatch.pipeline.engine.DispatchProcessor`.
"""
