#!/usr/bin/env python3
"""
Run the dispatch processor against a local file, without storage or DB.

Results are kept in an in-memory store, so `--all-chunks` behaves like
a caller re-invoking the processor until no more chunks are needed.

Usage:
    cd backend
    python -m scripts.process_local_file path/to/LETTURE_2024_03.zip --type LETTURE --all-chunks
    python -m scripts.process_local_file anagrafica.csv --type ANAGRAFICA --month 2024-03
"""

import argparse
import asyncio
import json
import os
import sys
import uuid

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("path", help="Local CSV/XML/ZIP file")
    parser.add_argument("--type", dest="file_type", required=True,
                        choices=["LETTURE", "ANAGRAFICA", "AGGR_IP", "IP_DETAIL"])
    parser.add_argument("--zone", dest="zone_code", default=None)
    parser.add_argument("--month", dest="month_reference", default=None, help="YYYY-MM")
    parser.add_argument("--chunk", dest="chunk_index", type=int, default=0)
    parser.add_argument("--all-chunks", action="store_true",
                        help="Keep invoking until more_chunks_needed is false")
    parser.add_argument("--json", action="store_true", help="Print full JSON responses")
    return parser.parse_args(argv)


async def run(args) -> int:
    from dispatch.core.logging import setup_logging
    from dispatch.pipeline.context import FileRecord, ProcessRequest
    from dispatch.pipeline.engine import DispatchProcessor
    from dispatch.repositories.store import InMemoryDispatchStore
    from dispatch.storage.blob_fetcher import LocalBlobFetcher

    setup_logging("INFO")

    file_url = f"file://{os.path.abspath(args.path)}"
    record = FileRecord(
        id=str(uuid.uuid4()),
        file_name=os.path.basename(args.path),
        file_url=file_url,
        file_type=args.file_type,
        file_size=os.path.getsize(args.path),
        zone_code=args.zone_code,
        month_reference=args.month_reference,
    )
    store = InMemoryDispatchStore([record])
    processor = DispatchProcessor(store=store, fetcher=LocalBlobFetcher({file_url: args.path}))
    job_id = str(uuid.uuid4())

    chunk_index = args.chunk_index
    while True:
        outcome = await processor.process(
            ProcessRequest(file_id=record.id, job_id=job_id, chunk_index=chunk_index)
        )
        _print_outcome(outcome, args.json)
        next_chunk = outcome.result.get("next_chunk_index")
        if not (args.all_chunks and outcome.result.get("more_chunks_needed") and next_chunk is not None):
            break
        chunk_index = next_chunk

    print(f"\n  Rows stored: {len(store.rows)}")
    return 0 if outcome.success else 1


def _print_outcome(outcome, as_json: bool) -> None:
    """Pretty-print a ProcessOutcome."""
    if as_json:
        print(json.dumps(outcome.to_response(), indent=2, ensure_ascii=False))
        return

    result = outcome.result
    print(f"\n{'─' * 50}")
    print(f"  File         : {outcome.file.file_name} ({outcome.file.file_type})")
    print(f"  Chunk        : {outcome.chunk_index}")
    print(f"  Success      : {outcome.success}")
    print(f"  Duration     : {outcome.processing_time_ms}ms")
    if result.get("error"):
        print(f"  Error        : {result['error']}")
    for key in ("total_pods", "files_processed", "files_skipped", "total_chunks_needed",
                "more_chunks_needed", "total_o", "total_lp", "days_processed", "total_ip_pods"):
        if key in result:
            print(f"  {key:<13}: {result[key]}")

    print(f"\n  Step Results:")
    for sr in outcome.step_results:
        icon = "✓" if sr["status"] == "COMPLETED" else "✗" if sr["status"] == "FAILED" else "⊘"
        print(f"    {icon} {sr['step_name']} ({sr['duration_ms']}ms)")

    for warning in result.get("warnings", []):
        print(f"  ! {warning}")


if __name__ == "__main__":
    sys.exit(asyncio.run(run(_parse_args())))
