"""
FlowResolver — maps a dispatch file type to an ordered step sequence.

Every flow follows the same skeleton:

    [continuation] → size gate → download → extract → persist

Only LETTURE files are chunked, so only their flow loads the progress
of earlier chunks.  Each step reads ctx.finished and skips once the
result is final, except persist which always runs.

To add a new file type:
    1. Write its extract step in steps/
    2. Register a flow builder in FLOW_REGISTRY below
"""

from __future__ import annotations

from typing import Callable

from dispatch.core.constants import DispatchFileType
from dispatch.core.logging import get_logger
from dispatch.pipeline.errors import FlowResolutionError
from dispatch.pipeline.step import PipelineStep
from dispatch.pipeline.steps import (
    DownloadFileStep,
    ExtractAggrIpStep,
    ExtractAnagraficaStep,
    ExtractIpDetailStep,
    ExtractLettureStep,
    LoadContinuationStep,
    PersistResultStep,
    SizeGateStep,
    StepDependencies,
)

logger = get_logger(__name__)

FlowBuilder = Callable[[StepDependencies], list[PipelineStep]]


def _wrap(deps: StepDependencies, extract: PipelineStep) -> list[PipelineStep]:
    """Size gate + download before the extract step, persist after it."""
    return [
        SizeGateStep(deps.config),
        DownloadFileStep(deps.fetcher),
        extract,
        PersistResultStep(deps.store),
    ]


def _letture_flow(deps: StepDependencies) -> list[PipelineStep]:
    return [
        LoadContinuationStep(deps.store),
        *_wrap(deps, ExtractLettureStep(deps.config)),
    ]


def _anagrafica_flow(deps: StepDependencies) -> list[PipelineStep]:
    return _wrap(deps, ExtractAnagraficaStep())


def _aggr_ip_flow(deps: StepDependencies) -> list[PipelineStep]:
    return _wrap(deps, ExtractAggrIpStep())


def _ip_detail_flow(deps: StepDependencies) -> list[PipelineStep]:
    return _wrap(deps, ExtractIpDetailStep())


# ═══════════════════════════════════════════════════════════
#  Flow Registry
# ═══════════════════════════════════════════════════════════

FLOW_REGISTRY: dict[str, FlowBuilder] = {
    DispatchFileType.LETTURE: _letture_flow,
    DispatchFileType.ANAGRAFICA: _anagrafica_flow,
    DispatchFileType.AGGR_IP: _aggr_ip_flow,
    DispatchFileType.IP_DETAIL: _ip_detail_flow,
}


class FlowResolver:
    """Resolves a file type to its list of pipeline steps."""

    def __init__(self, registry: dict[str, FlowBuilder] | None = None) -> None:
        self.registry = registry or FLOW_REGISTRY

    def resolve(self, file_type: str, deps: StepDependencies) -> list[PipelineStep]:
        """
        Return the ordered step list for a file type.

        Raises:
            FlowResolutionError: If the file type has no registered flow.
        """
        builder = self.registry.get(file_type)
        if builder is None:
            raise FlowResolutionError(
                f"Unknown file type: {file_type}",
                step_name="flow_resolution",
            )
        logger.info("Flow resolved", file_type=file_type)
        return builder(deps)

    def failure_flow(self, deps: StepDependencies) -> list[PipelineStep]:
        """Steps run when no flow exists: only record the failed row."""
        return [PersistResultStep(deps.store)]

    def list_available_flows(self) -> list[str]:
        return list(self.registry.keys())
