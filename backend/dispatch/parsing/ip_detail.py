"""IP_DETAIL parser: public-lighting POD list, one POD per row."""

from __future__ import annotations

from dispatch.parsing.common import detect_separator, is_valid_pod, split_lines, split_row


def parse_ip_detail_csv(content: str) -> list[str]:
    """Take the first POD-looking cell of each data row."""
    lines = split_lines(content)
    if not lines:
        return []

    separator = detect_separator(lines[0])
    pods: list[str] = []
    for line in lines[1:]:
        for value in split_row(line, separator):
            if is_valid_pod(value):
                pods.append(value)
                break
    return pods
