from typing import Annotated

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.services.pipeline.orchestrator import PipelineOrchestrator


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_orchestrator(settings: SettingsDep) -> PipelineOrchestrator:
    """Get a pipeline orchestrator bound to the current settings."""
    return PipelineOrchestrator(settings=settings)


OrchestratorDep = Annotated[PipelineOrchestrator, Depends(get_orchestrator)]
