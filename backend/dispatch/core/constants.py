"""Shared constants and enums used across the application."""

from enum import StrEnum


class DispatchFileType(StrEnum):
    """Kinds of source file uploaded for a dispatch calculation."""

    LETTURE = "LETTURE"
    ANAGRAFICA = "ANAGRAFICA"
    AGGR_IP = "AGGR_IP"
    IP_DETAIL = "IP_DETAIL"


class ResultStatus(StrEnum):
    """Status of an intermediate result row."""

    COMPLETED = "completed"
    FAILED = "failed"


class PipelineStatus(StrEnum):
    """Overall status of a processor invocation."""

    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class StepStatus(StrEnum):
    """Status of an individual pipeline step."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


# Quarter-hours in one day (24h x 4).
QUARTER_HOURS_PER_DAY = 96

# Column offset of QH1 in AGGR_IP files without QH headers.
AGGR_IP_FIXED_QH_OFFSET = 8

# Minimum length (exclusive) of an accepted POD code.
POD_MIN_LENGTH = 10
POD_PREFIX = "IT"

POD_HEADER_NAMES = (
    "POD",
    "CODICE_POD",
    "COD_POD",
    "CODICE POD",
    "PUNTO_PRELIEVO",
    "IDENTIFICATIVO_POD",
)

ANAGRAFICA_POD_HEADER_NAMES = (
    "POD",
    "CODICE_POD",
    "COD_POD",
    "CODICE POD",
    "PUNTO_PRELIEVO",
)

TRATTAMENTO_FALLBACK_HEADERS = (
    "TRATTAMENTO",
    "TIPO_TRATTAMENTO",
    "TIPO_MISURATORE",
    "TIPO",
)

HOURLY_TREATMENTS = frozenset({"O", "ORARIO", "1", "TM", "TMO"})
LOAD_PROFILE_TREATMENTS = frozenset({"F", "LP", "NM"})

SIZE_GATE_WARNING = (
    "File troppo grande ({size_mb:.1f} MB, limite {limit_mb:.0f} MB): "
    "download saltato. Caricare file più piccoli o suddividere l'archivio."
)

DOWNLOAD_FAILED_ERROR = "Could not download file"
