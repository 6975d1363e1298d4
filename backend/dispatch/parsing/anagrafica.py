"""
ANAGRAFICA (POD registry) parser.

Registry exports list every POD of a zone together with its metering
treatment for each month of the year.  Some distributors prepend a
metadata line (export date, zone, ...) before the real header, so the
header row is detected rather than assumed.

Each POD is classified by the treatment code for the dispatch month:
    - hourly metered ("O")      → pod_codes_o
    - load-profile estimated    → pod_codes_lp
    - anything else             → neither
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dispatch.core.constants import (
    ANAGRAFICA_POD_HEADER_NAMES,
    HOURLY_TREATMENTS,
    LOAD_PROFILE_TREATMENTS,
    POD_PREFIX,
    TRATTAMENTO_FALLBACK_HEADERS,
)
from dispatch.parsing.common import (
    detect_separator,
    find_column,
    find_pod_column_by_value,
    split_header,
    split_lines,
    split_row,
)

MIN_POD_LENGTH = 5


@dataclass
class AnagraficaParse:
    """PODs split by treatment class, plus any parser warnings."""

    pod_codes_o: list[str] = field(default_factory=list)
    pod_codes_lp: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def classify_treatment(trattamento: str) -> str | None:
    """Return "O", "LP", or None for a treatment code."""
    code = trattamento.strip().upper()
    if code in HOURLY_TREATMENTS:
        return "O"
    if code in LOAD_PROFILE_TREATMENTS:
        return "LP"
    return None


def looks_like_header(line: str, separator: str, month_reference: str | None = None) -> bool:
    """True when some cell is exactly a known POD or treatment column name."""
    headers = split_header(line, separator)
    if find_column(headers, ANAGRAFICA_POD_HEADER_NAMES) != -1:
        return True
    treatment_names = [*trattamento_column_names(month_reference), *TRATTAMENTO_FALLBACK_HEADERS]
    return find_column(headers, treatment_names) != -1


def trattamento_column_names(month_reference: str | None) -> list[str]:
    """Month-specific treatment column spellings for a "YYYY-MM" reference."""
    if not month_reference or "-" not in month_reference:
        return []
    try:
        month_num = int(month_reference.split("-")[1])
    except ValueError:
        return []
    mm = f"{month_num:02d}"
    m = str(month_num)
    return [
        f"TRATTAMENTO_{mm}",
        f"TRATTAMENTO_{m}",
        f"TRATTAMENTO{mm}",
        f"TRATTAMENTO{m}",
        f"TIPO_TRATTAMENTO_{mm}",
        f"TIPO_TRATTAMENTO_{m}",
    ]


def parse_anagrafica_csv(content: str, month_reference: str | None = None) -> AnagraficaParse:
    """Parse one registry CSV into hourly and load-profile POD lists."""
    result = AnagraficaParse()
    lines = split_lines(content)
    if not lines:
        return result

    header_idx = 0
    separator = detect_separator(lines[0])
    if len(lines) > 1 and not looks_like_header(lines[0], separator, month_reference):
        # First line is export metadata; the header follows it
        header_idx = 1
        separator = detect_separator(lines[1])

    headers = split_header(lines[header_idx], separator)
    data_lines = lines[header_idx + 1:]

    pod_col = find_column(headers, ANAGRAFICA_POD_HEADER_NAMES)
    if pod_col == -1:
        first_data = data_lines[0] if data_lines else None
        pod_col = find_pod_column_by_value(first_data, separator, len(headers))
    if pod_col == -1:
        result.warnings.append("Colonna POD non trovata nel file anagrafica")
        return result

    trattamento_col = find_column(headers, trattamento_column_names(month_reference))
    if trattamento_col == -1:
        trattamento_col = find_column(headers, TRATTAMENTO_FALLBACK_HEADERS)
    if trattamento_col == -1:
        result.warnings.append(
            "Colonna trattamento non trovata: POD classificati come orari"
        )

    for line in data_lines:
        values = split_row(line, separator)
        if len(values) <= pod_col:
            continue

        pod = values[pod_col]
        if len(pod) < MIN_POD_LENGTH:
            continue

        if trattamento_col == -1:
            if pod.startswith(POD_PREFIX):
                result.pod_codes_o.append(pod)
            continue

        trattamento = values[trattamento_col] if len(values) > trattamento_col else ""
        treatment_class = classify_treatment(trattamento)
        if treatment_class == "O":
            result.pod_codes_o.append(pod)
        elif treatment_class == "LP":
            result.pod_codes_lp.append(pod)

    return result
