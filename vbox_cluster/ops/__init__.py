"""Operations - bulk workflows over a cluster."""

from .pipeline import BulkOperationPipeline, Failure, PipelineReport
from .prerequisites import check_dependencies, format_install_instructions

__all__ = [
    "BulkOperationPipeline",
    "Failure",
    "PipelineReport",
    "check_dependencies",
    "format_install_instructions",
]
