"""
ExtractAggrIpStep — averages daily quarter-hour curves of public lighting.
"""

from __future__ import annotations

from dispatch.core.logging import get_logger
from dispatch.parsing.curves import calculate_average_curve, parse_aggr_ip_csv
from dispatch.pipeline.context import DispatchContext, StepResult
from dispatch.pipeline.results import AggrIpResult
from dispatch.pipeline.steps.base import CsvSourceStep

logger = get_logger(__name__)


class ExtractAggrIpStep(CsvSourceStep):
    name = "extract_aggr_ip"
    description = "Build the typical-day curve from AGGR_IP files"
    timeout_warning = "Timeout during IP processing"

    async def execute(self, ctx: DispatchContext) -> StepResult:
        started_at = self._now()
        result: AggrIpResult = ctx.result  # type: ignore[assignment]

        daily_curves: list[list[float]] = []
        for _entry, text in self.iter_csv_sources(ctx):
            parsed = parse_aggr_ip_csv(text)
            daily_curves.extend(parsed.daily_curves)
            result.warnings.extend(parsed.warnings)

        result.typical_day_curve = calculate_average_curve(daily_curves)
        result.days_processed = len(daily_curves)
        result.total_consumption = sum(result.typical_day_curve)

        logger.info(
            "AGGR_IP extracted",
            days_processed=result.days_processed,
            total_consumption=round(result.total_consumption, 3),
        )
        return self._success(started_at, metadata={"days_processed": result.days_processed})
