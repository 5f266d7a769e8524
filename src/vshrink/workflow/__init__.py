"""Batch conversion workflow.

- pipeline.py: per-file state machine driving probe, passes and evaluation
- summary.py: outcome counts for a batch
"""

from vshrink.workflow.pipeline import LOG_PURPOSES, ConversionPipeline, PipelineState
from vshrink.workflow.summary import BatchSummary

__all__ = [
    "LOG_PURPOSES",
    "BatchSummary",
    "ConversionPipeline",
    "PipelineState",
]
