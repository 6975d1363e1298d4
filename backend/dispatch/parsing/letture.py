"""
POD extraction from LETTURE (interval metering) files.

Three sources are supported:
    - CSV files with a POD column (header or first-row detection)
    - XML files, matched by regex against known tag/attribute spellings
    - legacy filenames that embed the POD code itself
"""

from __future__ import annotations

import re

from dispatch.core.constants import POD_HEADER_NAMES
from dispatch.parsing.common import (
    detect_separator,
    find_column,
    find_pod_column_by_value,
    is_valid_pod,
    split_header,
    split_lines,
    split_row,
    unique,
)

# Schema variants seen across distributors.  No XML validation is done.
XML_POD_PATTERNS = (
    re.compile(r"<POD>([^<]+)</POD>", re.IGNORECASE),
    re.compile(r"<CodPod>([^<]+)</CodPod>", re.IGNORECASE),
    re.compile(r"<CodicePOD>([^<]+)</CodicePOD>", re.IGNORECASE),
    re.compile(r'POD="([^"]+)"', re.IGNORECASE),
)

# IT + 3 alphanumerics (distributor) + E + 8 digits
FILENAME_POD_PATTERN = re.compile(r"IT[A-Z0-9]{3}E\d{8}", re.IGNORECASE)


def parse_letture_csv(content: str) -> list[str]:
    """Return every valid POD found in the POD column, one per data row."""
    lines = split_lines(content)
    if not lines:
        return []

    separator = detect_separator(lines[0])
    headers = split_header(lines[0], separator)

    pod_col = find_column(headers, POD_HEADER_NAMES)
    if pod_col == -1:
        first_data = lines[1] if len(lines) > 1 else None
        pod_col = find_pod_column_by_value(first_data, separator, len(headers))
    if pod_col == -1:
        return []

    pods: list[str] = []
    for line in lines[1:]:
        values = split_row(line, separator)
        if len(values) <= pod_col:
            continue
        candidate = values[pod_col]
        if is_valid_pod(candidate):
            pods.append(candidate)
    return pods


def parse_letture_xml(content: str) -> list[str]:
    """Return every valid POD matched by any known XML pattern."""
    pods: list[str] = []
    for pattern in XML_POD_PATTERNS:
        for match in pattern.finditer(content):
            candidate = match.group(1).strip()
            if is_valid_pod(candidate):
                pods.append(candidate)
    return pods


def extract_pods_from_filename(file_name: str) -> list[str]:
    """Recover POD codes embedded in a filename (used when we cannot download)."""
    return unique(m.group(0).upper() for m in FILENAME_POD_PATTERN.finditer(file_name))


def parse_pod_entry(name: str, text: str) -> list[str]:
    """Route an archive entry to the CSV or XML parser by suffix."""
    if name.lower().endswith(".xml"):
        return parse_letture_xml(text)
    return parse_letture_csv(text)
