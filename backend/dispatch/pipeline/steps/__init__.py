"""Processor steps, one module per step."""

from dispatch.pipeline.steps.base import ProcessorConfig, StepDependencies
from dispatch.pipeline.steps.download_file import DownloadFileStep
from dispatch.pipeline.steps.extract_aggr_ip import ExtractAggrIpStep
from dispatch.pipeline.steps.extract_anagrafica import ExtractAnagraficaStep
from dispatch.pipeline.steps.extract_ip_detail import ExtractIpDetailStep
from dispatch.pipeline.steps.extract_letture import ExtractLettureStep
from dispatch.pipeline.steps.load_continuation import LoadContinuationStep
from dispatch.pipeline.steps.persist_result import PersistResultStep
from dispatch.pipeline.steps.size_gate import SizeGateStep

__all__ = [
    "DownloadFileStep",
    "ExtractAggrIpStep",
    "ExtractAnagraficaStep",
    "ExtractIpDetailStep",
    "ExtractLettureStep",
    "LoadContinuationStep",
    "PersistResultStep",
    "ProcessorConfig",
    "SizeGateStep",
    "StepDependencies",
]
