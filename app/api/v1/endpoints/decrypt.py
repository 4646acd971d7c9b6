from fastapi import APIRouter, HTTPException, status

from app.core.exceptions import DecryptionError, EngineNotFoundError, InvalidParamError
from app.dependencies import OrchestratorDep, SettingsDep
from app.models.schemas import DecryptRequest, DecryptResponse, ErrorResponse, Mode

router = APIRouter()


@router.post(
    "",
    response_model=DecryptResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or wrong key"},
        404: {"model": ErrorResponse, "description": "Cipher type not supported"},
    },
    summary="Decrypt ciphertext",
    description="Decrypt ciphertext with a single cipher stage.",
)
async def decrypt_ciphertext(
    request: DecryptRequest,
    settings: SettingsDep,
    orchestrator: OrchestratorDep,
) -> DecryptResponse:
    """
    Decrypt ciphertext with one stage engine.

    Parameters not supplied fall back to the engine's defaults.
    """
    # Validate ciphertext length
    if len(request.ciphertext) > settings.max_input_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ciphertext exceeds maximum length of {settings.max_input_length}",
        )

    try:
        engine, params = orchestrator.resolve_stage(request.cipher_type, request.params)
        plaintext = engine.apply(request.ciphertext, params, Mode.DECRYPT)
    except EngineNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except (InvalidParamError, DecryptionError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return DecryptResponse(
        plaintext=plaintext,
        cipher_type=request.cipher_type,
        params_used=params.model_dump(exclude={"kind"}),
        explanation=engine.explain(params),
    )
