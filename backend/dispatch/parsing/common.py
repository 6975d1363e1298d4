"""
Low-level helpers shared by the CSV parsers.

Dispatch CSVs come from several distributors with no agreed dialect:
separators vary between ';' and ',', cells may be quoted, and headers
differ in spelling.  These helpers implement the tolerant reading rules
every parser applies.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from dispatch.core.constants import POD_MIN_LENGTH, POD_PREFIX


def split_lines(content: str) -> list[str]:
    """Split on newlines and drop blank lines."""
    return [line for line in content.split("\n") if line.strip()]


def detect_separator(header_line: str) -> str:
    return ";" if ";" in header_line else ","


def clean_cell(value: str) -> str:
    """Strip whitespace and remove double quotes."""
    return value.strip().replace('"', "")


def split_row(line: str, separator: str) -> list[str]:
    return [clean_cell(v) for v in line.split(separator)]


def split_header(line: str, separator: str) -> list[str]:
    return [h.strip().upper() for h in line.split(separator)]


def find_column(headers: Sequence[str], candidates: Iterable[str]) -> int:
    """Return the index of the first candidate present in headers, or -1."""
    for name in candidates:
        if name in headers:
            return headers.index(name)
    return -1


def find_pod_column_by_value(first_data_line: str | None, separator: str, width: int) -> int:
    """
    Locate the POD column from the first data row when no header matched.

    Returns the first column (within the header width) whose cell starts
    with the Italian POD prefix, or -1.
    """
    if first_data_line is None:
        return -1
    cells = first_data_line.split(separator)
    for index in range(min(width, len(cells))):
        if cells[index].strip().startswith(POD_PREFIX):
            return index
    return -1


def is_valid_pod(value: str) -> bool:
    return value.startswith(POD_PREFIX) and len(value) > POD_MIN_LENGTH


def unique(values: Iterable[str]) -> list[str]:
    """Deduplicate while keeping first-seen order."""
    return list(dict.fromkeys(values))
