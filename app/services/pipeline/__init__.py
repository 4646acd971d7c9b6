"""
Pipeline services for multi-layer encryption.

This module implements the stage pipeline that:
1. Keeps the fixed set of stages with their order, switches and parameters
2. Runs input text through the enabled stages in order
3. Records every stage's input and output as a trace
"""

from app.services.pipeline.orchestrator import (
    PipelineOrchestrator,
    PipelineOutcome,
    PipelineResult,
    StepRecord,
)
from app.services.pipeline.stages import StageSet

__all__ = [
    "PipelineOrchestrator",
    "PipelineOutcome",
    "PipelineResult",
    "StageSet",
    "StepRecord",
]
