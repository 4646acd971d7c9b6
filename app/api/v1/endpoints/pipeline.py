from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status

from app.core.exceptions import CryptoForgeError, InvalidStageSetError, StageFailedError
from app.dependencies import OrchestratorDep
from app.models.schemas import (
    ErrorResponse,
    PipelineRunRequest,
    PipelineRunResponse,
    StageSetResponse,
)
from app.services.pipeline.stages import StageSet

router = APIRouter()


def _error_status(error: CryptoForgeError) -> int:
    if isinstance(error, StageFailedError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_400_BAD_REQUEST


def _http_error(error: CryptoForgeError) -> HTTPException:
    return HTTPException(
        status_code=_error_status(error),
        detail=ErrorResponse(
            error=error.code,
            message=error.message,
            details=error.details,
        ).model_dump(),
    )


@router.post(
    "/run",
    response_model=PipelineRunResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or stage parameters"},
        422: {"model": ErrorResponse, "description": "A stage failed"},
    },
    summary="Run the cipher pipeline",
    description="Apply the enabled stages, in order, to the input text and return the trace.",
)
async def run_pipeline(
    request: PipelineRunRequest,
    orchestrator: OrchestratorDep,
) -> PipelineRunResponse:
    """
    Run the input through the pipeline.

    When no stages are sent, the default stage set is used. Sent stages
    must hold one stage per kind with orders 1..N.
    """
    try:
        stage_set = StageSet(request.stages) if request.stages is not None else StageSet.default()
    except InvalidStageSetError as e:
        raise _http_error(e)

    outcome = orchestrator.run(request.text, request.mode, stage_set.snapshot())

    if not outcome.ok:
        raise _http_error(outcome.error)

    result = outcome.result
    return PipelineRunResponse(
        final_output=result.final_output,
        trace=[asdict(step) for step in result.trace],
        mode=result.mode,
        message=result.message,
    )


@router.get(
    "/stages",
    response_model=StageSetResponse,
    summary="Default stage set",
    description="The stages a new session starts with, in execution order.",
)
async def get_default_stages() -> StageSetResponse:
    return StageSetResponse(stages=StageSet.default().ordered())
