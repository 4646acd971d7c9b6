from typing import Any


class CryptoForgeError(Exception):
    """Base exception for all pipeline and cipher errors."""

    code: str = "error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CryptoForgeError):
    """Raised when input validation fails."""

    code = "validation_error"


class EmptyInputError(ValidationError):
    """Raised when the input text is empty or whitespace only."""

    code = "empty_input"

    def __init__(self):
        super().__init__("Please enter some text to process")


class NoStagesSelectedError(ValidationError):
    """Raised when a run has no enabled stage."""

    code = "no_stages_selected"

    def __init__(self):
        super().__init__("Please select at least one encryption algorithm")


class InputTooLongError(ValidationError):
    """Raised when input text exceeds maximum length."""

    code = "input_too_long"

    def __init__(self, length: int, max_length: int):
        super().__init__(
            f"Input length {length} exceeds maximum {max_length}",
            {"length": length, "max_length": max_length},
        )


class InvalidParamError(ValidationError):
    """Raised when a stage parameter violates its constraint."""

    code = "invalid_param"

    def __init__(self, stage_name: str, param: str, reason: str):
        self.stage_name = stage_name
        self.param = param
        super().__init__(
            f"Invalid {param} for {stage_name}: {reason}",
            {"stage_name": stage_name, "param": param},
        )


class InvalidStageSetError(ValidationError):
    """Raised when a stage set breaks its kind or ordering invariants."""

    code = "invalid_stage_set"


class EngineError(CryptoForgeError):
    """Base exception for cipher engine errors."""

    code = "engine_error"


class EngineNotFoundError(EngineError):
    """Raised when requested cipher engine is not found."""

    code = "engine_not_found"

    def __init__(self, engine_name: str):
        super().__init__(
            f"Cipher engine '{engine_name}' not found",
            {"engine_name": engine_name},
        )


class EncryptionError(EngineError):
    """Raised when encryption fails."""

    code = "encryption_failed"


class DecryptionError(EngineError):
    """Raised when decryption fails."""

    code = "decryption_failed"


class StageFailedError(EngineError):
    """Raised when a pipeline stage fails; carries the stage and its cause."""

    code = "stage_failed"

    def __init__(self, stage_name: str, cause: Exception):
        self.stage_name = stage_name
        self.cause = cause
        super().__init__(
            f"{stage_name} failed: {cause}",
            {"stage_name": stage_name, "cause": str(cause)},
        )
