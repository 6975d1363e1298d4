"""
ExtractAnagraficaStep — classifies registry PODs as hourly or load-profile.
"""

from __future__ import annotations

from dispatch.core.logging import get_logger
from dispatch.parsing.anagrafica import parse_anagrafica_csv
from dispatch.pipeline.context import DispatchContext, StepResult
from dispatch.pipeline.results import AnagraficaResult
from dispatch.pipeline.steps.base import CsvSourceStep

logger = get_logger(__name__)


class ExtractAnagraficaStep(CsvSourceStep):
    name = "extract_anagrafica"
    description = "Classify ANAGRAFICA PODs by treatment"
    timeout_warning = "Timeout during anagrafica processing"

    async def execute(self, ctx: DispatchContext) -> StepResult:
        started_at = self._now()
        result: AnagraficaResult = ctx.result  # type: ignore[assignment]

        hourly: list[str] = []
        load_profile: list[str] = []
        files = 0
        for entry, text in self.iter_csv_sources(ctx):
            parsed = parse_anagrafica_csv(text, ctx.file.month_reference)
            hourly.extend(parsed.pod_codes_o)
            load_profile.extend(parsed.pod_codes_lp)
            result.warnings.extend(parsed.warnings)
            files += 1
            logger.debug("Registry file parsed", entry=entry, hourly=len(parsed.pod_codes_o))

        result.set_pods(hourly, load_profile)
        result.zone_code = ctx.file.zone_code

        logger.info(
            "ANAGRAFICA extracted",
            files=files,
            total_o=result.total_o,
            total_lp=result.total_lp,
            zone_code=result.zone_code,
        )
        return self._success(started_at, metadata={
            "files": files,
            "total_o": result.total_o,
            "total_lp": result.total_lp,
        })
