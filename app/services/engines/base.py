from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import InvalidParamError
from app.models.schemas import Mode, StageKind


class CipherEngine(ABC):
    """
    Abstract base class for all pipeline cipher engines.

    Each cipher implementation must provide:
    - encrypt(): Apply the transform forward
    - decrypt(): Apply the inverse transform
    - explain(): Generate human-readable explanation

    Parameter parsing and validation are shared: every engine declares the
    pydantic model holding its parameters in ``params_model``.
    """

    # Cipher metadata
    name: str
    cipher_type: StageKind
    description: str
    params_model: ClassVar[type[BaseModel]]

    @abstractmethod
    def encrypt(self, plaintext: str, params: BaseModel) -> str:
        """
        Encrypt plaintext with the given parameters.

        Args:
            plaintext: The plaintext to encrypt
            params: Validated stage parameters

        Returns:
            Ciphertext
        """
        pass

    @abstractmethod
    def decrypt(self, ciphertext: str, params: BaseModel) -> str:
        """
        Decrypt ciphertext with the given parameters.

        Args:
            ciphertext: The ciphertext to decrypt
            params: Validated stage parameters

        Returns:
            Plaintext
        """
        pass

    @abstractmethod
    def explain(self, params: BaseModel) -> str:
        """
        Generate human-readable explanation of the transform.

        Args:
            params: The parameters used

        Returns:
            Explanation string
        """
        pass

    def apply(self, text: str, params: BaseModel, mode: Mode) -> str:
        """Run the engine in the requested direction."""
        if mode == Mode.ENCRYPT:
            return self.encrypt(text, params)
        return self.decrypt(text, params)

    def default_params(self) -> BaseModel:
        """Parameters used when the caller provides none."""
        return self.params_model()

    def parse_params(
        self,
        raw: dict[str, Any] | BaseModel,
        stage_name: str | None = None,
    ) -> BaseModel:
        """
        Validate raw parameters into this engine's params model.

        Models are dumped and validated again, so instances built without
        validation (or mutated after construction) are checked too.

        Raises:
            InvalidParamError: If a parameter violates its constraint
        """
        data = raw.model_dump() if isinstance(raw, BaseModel) else dict(raw)
        data.setdefault("kind", self.cipher_type.value)

        try:
            return self.params_model.model_validate(data)
        except PydanticValidationError as e:
            error = e.errors()[0]
            param = ".".join(str(part) for part in error["loc"]) or "params"
            raise InvalidParamError(stage_name or self.name, param, error["msg"]) from e
