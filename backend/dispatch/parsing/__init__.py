"""
Format parsers for dispatch source files.

Parsers are pure functions over decoded text.  They never raise on
malformed rows: bad rows are skipped and format-level problems are
reported as warning strings.
"""

from dispatch.parsing.anagrafica import AnagraficaParse, parse_anagrafica_csv
from dispatch.parsing.curves import CurveParse, calculate_average_curve, parse_aggr_ip_csv
from dispatch.parsing.ip_detail import parse_ip_detail_csv
from dispatch.parsing.letture import (
    extract_pods_from_filename,
    parse_letture_csv,
    parse_letture_xml,
    parse_pod_entry,
)

__all__ = [
    "AnagraficaParse",
    "CurveParse",
    "calculate_average_curve",
    "extract_pods_from_filename",
    "parse_aggr_ip_csv",
    "parse_anagrafica_csv",
    "parse_ip_detail_csv",
    "parse_letture_csv",
    "parse_letture_xml",
    "parse_pod_entry",
]
