"""
ExtractIpDetailStep — lists the PODs of public-lighting points.
"""

from __future__ import annotations

from dispatch.core.logging import get_logger
from dispatch.parsing.ip_detail import parse_ip_detail_csv
from dispatch.pipeline.context import DispatchContext, StepResult
from dispatch.pipeline.results import IpDetailResult
from dispatch.pipeline.steps.base import CsvSourceStep

logger = get_logger(__name__)


class ExtractIpDetailStep(CsvSourceStep):
    name = "extract_ip_detail"
    description = "Extract public-lighting POD codes"
    timeout_warning = "Timeout during IP detail processing"

    async def execute(self, ctx: DispatchContext) -> StepResult:
        started_at = self._now()
        result: IpDetailResult = ctx.result  # type: ignore[assignment]

        pods: list[str] = []
        for _entry, text in self.iter_csv_sources(ctx):
            pods.extend(parse_ip_detail_csv(text))

        result.set_pods(pods)
        logger.info("IP_DETAIL extracted", total_ip_pods=result.total_ip_pods)
        return self._success(started_at, metadata={"total_ip_pods": result.total_ip_pods})
