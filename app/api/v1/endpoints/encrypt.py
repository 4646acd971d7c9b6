from fastapi import APIRouter, HTTPException, status

from app.core.exceptions import EncryptionError, EngineNotFoundError, InvalidParamError
from app.dependencies import OrchestratorDep, SettingsDep
from app.models.schemas import EncryptRequest, EncryptResponse, ErrorResponse, Mode

router = APIRouter()


@router.post(
    "",
    response_model=EncryptResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        404: {"model": ErrorResponse, "description": "Cipher type not supported"},
    },
    summary="Encrypt plaintext",
    description="Encrypt plaintext with a single cipher stage.",
)
async def encrypt_plaintext(
    request: EncryptRequest,
    settings: SettingsDep,
    orchestrator: OrchestratorDep,
) -> EncryptResponse:
    """
    Encrypt plaintext with one stage engine.

    Parameters not supplied fall back to the engine's defaults.
    """
    # Validate plaintext length
    if len(request.plaintext) > settings.max_input_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Plaintext exceeds maximum length of {settings.max_input_length}",
        )

    try:
        engine, params = orchestrator.resolve_stage(request.cipher_type, request.params)
        ciphertext = engine.apply(request.plaintext, params, Mode.ENCRYPT)
    except EngineNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except (InvalidParamError, EncryptionError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return EncryptResponse(
        ciphertext=ciphertext,
        cipher_type=request.cipher_type,
        params_used=params.model_dump(exclude={"kind"}),
    )
