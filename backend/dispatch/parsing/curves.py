"""
Quarter-hour curve parsing for AGGR_IP (aggregated public lighting) files.

Each data row is one day with 96 quarter-hour values.  The parser
collects the non-empty days and `calculate_average_curve` folds them
into a single 96-point "typical day".
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dispatch.core.constants import AGGR_IP_FIXED_QH_OFFSET, QUARTER_HOURS_PER_DAY
from dispatch.parsing.common import detect_separator, split_header, split_lines, split_row

UNRECOGNISED_FORMAT_WARNING = "Formato file AGGR_IP non riconosciuto"


@dataclass
class CurveParse:
    daily_curves: list[list[float]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def parse_decimal(raw: str) -> float:
    """
    Parse a decimal written with either comma or dot.

    "1.234,5" and "1,234.5" both read as 1234.5; anything unparseable is 0.
    """
    value = raw.strip()
    if not value:
        return 0.0
    if "," in value and "." in value:
        if value.rfind(",") > value.rfind("."):
            value = value.replace(".", "").replace(",", ".")
        else:
            value = value.replace(",", "")
    else:
        value = value.replace(",", ".")
    try:
        return float(value)
    except ValueError:
        return 0.0


def quarter_hour_columns(headers: list[str]) -> list[int] | None:
    """Resolve the 96 QH column indices, by name or fixed offset."""
    named = [headers.index(f"QH{i}") for i in range(1, QUARTER_HOURS_PER_DAY + 1) if f"QH{i}" in headers]
    if len(named) == QUARTER_HOURS_PER_DAY:
        return named
    if len(headers) >= AGGR_IP_FIXED_QH_OFFSET + QUARTER_HOURS_PER_DAY:
        return list(range(AGGR_IP_FIXED_QH_OFFSET, AGGR_IP_FIXED_QH_OFFSET + QUARTER_HOURS_PER_DAY))
    return None


def parse_aggr_ip_csv(content: str) -> CurveParse:
    """Extract every non-zero daily curve from an AGGR_IP CSV."""
    result = CurveParse()
    lines = split_lines(content)
    if not lines:
        return result

    separator = detect_separator(lines[0])
    headers = split_header(lines[0], separator)

    qh_indices = quarter_hour_columns(headers)
    if qh_indices is None:
        result.warnings.append(UNRECOGNISED_FORMAT_WARNING)
        return result

    last_index = max(qh_indices)
    for line in lines[1:]:
        values = split_row(line, separator)
        if len(values) <= last_index:
            continue

        day_curve = [parse_decimal(values[idx]) for idx in qh_indices]
        if any(v != 0 for v in day_curve):
            result.daily_curves.append(day_curve)

    return result


def calculate_average_curve(daily_curves: list[list[float]]) -> list[float]:
    """Per-slot mean across days; always 96 values, all zero without data."""
    if not daily_curves:
        return [0.0] * QUARTER_HOURS_PER_DAY

    average: list[float] = []
    for slot in range(QUARTER_HOURS_PER_DAY):
        samples = [curve[slot] for curve in daily_curves if slot < len(curve)]
        average.append(sum(samples) / len(samples) if samples else 0.0)
    return average
