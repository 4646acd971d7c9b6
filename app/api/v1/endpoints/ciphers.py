from fastapi import APIRouter

from app.models.schemas import CipherInfo
from app.services.engines.registry import EngineRegistry

router = APIRouter()


@router.get(
    "",
    response_model=list[CipherInfo],
    summary="List cipher engines",
    description="Every registered stage engine with its default parameters.",
)
async def list_ciphers() -> list[CipherInfo]:
    registry = EngineRegistry()
    return [
        CipherInfo(
            cipher_type=engine.cipher_type,
            name=engine.name,
            description=engine.description,
            default_params=engine.default_params().model_dump(),
        )
        for engine in registry.get_all_engines()
    ]
