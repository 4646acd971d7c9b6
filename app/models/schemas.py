import string
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.config import get_settings


# ============================================================================
# Enums
# ============================================================================


class StageKind(str, Enum):
    """Supported pipeline stage kinds."""

    STRONG_CIPHER = "strong-cipher"
    SUBSTITUTION = "substitution"
    TRANSPOSITION = "transposition"


class Mode(str, Enum):
    """Direction in which a pipeline is applied."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


DEFAULT_STAGE_NAMES: dict[StageKind, str] = {
    StageKind.STRONG_CIPHER: "AES",
    StageKind.SUBSTITUTION: "Vigenère",
    StageKind.TRANSPOSITION: "Rail Fence",
}


# ============================================================================
# Stage Parameter Schemas
# ============================================================================


class StrongCipherParams(BaseModel):
    """Parameters for the strong cipher stage. The key is passed through untouched."""

    kind: Literal["strong-cipher"] = "strong-cipher"
    key: str = ""


class SubstitutionParams(BaseModel):
    """Parameters for the Vigenère stage."""

    kind: Literal["substitution"] = "substitution"
    key: str = ""

    @field_validator("key")
    @classmethod
    def strip_non_letters(cls, value: str) -> str:
        return "".join(c for c in value if c in string.ascii_letters)


class TranspositionParams(BaseModel):
    """Parameters for the rail fence stage."""

    kind: Literal["transposition"] = "transposition"
    rails: int = 3

    @field_validator("rails")
    @classmethod
    def check_rail_bounds(cls, value: int) -> int:
        settings = get_settings()
        if not settings.min_rails <= value <= settings.max_rails:
            raise ValueError(
                f"rails must be between {settings.min_rails} and {settings.max_rails}"
            )
        return value


StageParams = Annotated[
    Union[StrongCipherParams, SubstitutionParams, TranspositionParams],
    Field(discriminator="kind"),
]


# ============================================================================
# Stage Configuration
# ============================================================================


class StageConfig(BaseModel):
    """One configured cipher step: kind, display name, switch, position and params."""

    id: StageKind
    name: str | None = None
    enabled: bool = False
    order: int = Field(ge=1)
    params: StageParams

    @model_validator(mode="before")
    @classmethod
    def fill_params_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("params"), dict):
            kind = data.get("id")
            if kind is not None and "kind" not in data["params"]:
                data = {**data, "params": {**data["params"], "kind": getattr(kind, "value", kind)}}
        return data

    @model_validator(mode="after")
    def check_params_match_kind(self) -> "StageConfig":
        if self.params.kind != self.id:
            raise ValueError(
                f"params of kind '{self.params.kind}' do not match stage '{self.id.value}'"
            )
        if not self.name:
            self.name = DEFAULT_STAGE_NAMES[self.id]
        return self


# ============================================================================
# Request Schemas
# ============================================================================


class PipelineRunRequest(BaseModel):
    """Request schema for /pipeline/run endpoint."""

    text: str
    mode: Mode = Mode.ENCRYPT
    stages: list[StageConfig] | None = None


class EncryptRequest(BaseModel):
    """Request schema for /encrypt endpoint."""

    plaintext: str = Field(min_length=1)
    cipher_type: StageKind
    params: dict[str, Any] = Field(default_factory=dict)


class DecryptRequest(BaseModel):
    """Request schema for /decrypt endpoint."""

    ciphertext: str = Field(min_length=1)
    cipher_type: StageKind
    params: dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Response Schemas
# ============================================================================


class StepRecordSchema(BaseModel):
    """One executed stage in a pipeline trace."""

    model_config = ConfigDict(from_attributes=True)

    algorithm_name: str
    input: str
    output: str


class PipelineRunResponse(BaseModel):
    """Response schema for /pipeline/run endpoint."""

    model_config = ConfigDict(from_attributes=True)

    final_output: str
    trace: list[StepRecordSchema]
    mode: Mode
    message: str


class StageSetResponse(BaseModel):
    """Response schema for /pipeline/stages endpoint."""

    stages: list[StageConfig]


class CipherInfo(BaseModel):
    """Registered cipher engine description."""

    cipher_type: StageKind
    name: str
    description: str
    default_params: dict[str, Any]


class EncryptResponse(BaseModel):
    """Response schema for /encrypt endpoint."""

    ciphertext: str
    cipher_type: StageKind
    params_used: dict[str, Any]


class DecryptResponse(BaseModel):
    """Response schema for /decrypt endpoint."""

    plaintext: str
    cipher_type: StageKind
    params_used: dict[str, Any]
    explanation: str


# ============================================================================
# Error Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
