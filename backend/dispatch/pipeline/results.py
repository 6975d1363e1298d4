"""
Typed result payloads, one variant per file type.

The payload is what gets stored in IntermediateResult.data and returned
as `result` in the HTTP response.  `kind` tags the variant so readers of
the JSON column know which fields to expect.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from dispatch.core.constants import DispatchFileType
from dispatch.parsing.common import unique


@dataclass
class ProcessingResult:
    """Fields shared by every variant."""

    kind: str = ""
    success: bool = True
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    skipped_due_to_size: bool = False

    def fail(self, error: str) -> "ProcessingResult":
        self.success = False
        self.error = error
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSONB storage and the HTTP response."""
        return asdict(self)


@dataclass
class LettureResult(ProcessingResult):
    kind: str = DispatchFileType.LETTURE.value
    pod_codes: list[str] = field(default_factory=list)
    total_pods: int = 0
    files_processed: int = 0
    files_skipped: int = 0
    chunk_index: int = 0
    total_chunks_needed: int = 1
    more_chunks_needed: bool = False
    next_chunk_index: int | None = None
    nested_zips_total: int = 0
    previous_pods_count: int = 0
    timed_out: bool = False

    def set_pods(self, pods: list[str]) -> None:
        self.pod_codes = unique(pods)
        self.total_pods = len(self.pod_codes)


@dataclass
class AnagraficaResult(ProcessingResult):
    kind: str = DispatchFileType.ANAGRAFICA.value
    pod_codes_o: list[str] = field(default_factory=list)
    pod_codes_lp: list[str] = field(default_factory=list)
    total_o: int = 0
    total_lp: int = 0
    zone_code: str | None = None

    def set_pods(self, hourly: list[str], load_profile: list[str]) -> None:
        self.pod_codes_o = unique(hourly)
        self.pod_codes_lp = unique(load_profile)
        self.total_o = len(self.pod_codes_o)
        self.total_lp = len(self.pod_codes_lp)


@dataclass
class AggrIpResult(ProcessingResult):
    kind: str = DispatchFileType.AGGR_IP.value
    typical_day_curve: list[float] = field(default_factory=list)
    days_processed: int = 0
    total_consumption: float = 0.0


@dataclass
class IpDetailResult(ProcessingResult):
    kind: str = DispatchFileType.IP_DETAIL.value
    ip_pod_codes: list[str] = field(default_factory=list)
    total_ip_pods: int = 0

    def set_pods(self, pods: list[str]) -> None:
        self.ip_pod_codes = unique(pods)
        self.total_ip_pods = len(self.ip_pod_codes)


RESULT_TYPES: dict[str, type[ProcessingResult]] = {
    DispatchFileType.LETTURE: LettureResult,
    DispatchFileType.ANAGRAFICA: AnagraficaResult,
    DispatchFileType.AGGR_IP: AggrIpResult,
    DispatchFileType.IP_DETAIL: IpDetailResult,
}


def new_result(file_type: str) -> ProcessingResult:
    """Empty payload for a file type; unknown types get the base variant."""
    result_cls = RESULT_TYPES.get(file_type)
    if result_cls is None:
        return ProcessingResult(kind=file_type)
    return result_cls()


def result_from_dict(data: dict[str, Any]) -> ProcessingResult:
    """Rebuild a typed payload from its stored JSON form."""
    result_cls = RESULT_TYPES.get(data.get("kind", ""), ProcessingResult)
    known = {name for name in result_cls.__dataclass_fields__}
    return result_cls(**{k: v for k, v in data.items() if k in known})
