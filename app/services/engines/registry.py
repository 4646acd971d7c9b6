from typing import Type

from app.models.schemas import StageKind
from app.services.engines.base import CipherEngine


class EngineRegistry:
    """
    Registry for cipher engines.

    Manages available cipher engines and provides lookup by stage kind.
    """

    _engines: dict[StageKind, Type[CipherEngine]] = {}
    _instances: dict[StageKind, CipherEngine] = {}

    @classmethod
    def register(cls, engine_class: Type[CipherEngine]) -> Type[CipherEngine]:
        """
        Register a cipher engine class.

        Can be used as a decorator:
            @EngineRegistry.register
            class VigenereEngine(CipherEngine):
                ...

        Args:
            engine_class: The engine class to register

        Returns:
            The engine class (for decorator usage)
        """
        cls._engines[engine_class.cipher_type] = engine_class
        return engine_class

    def get_engine(self, cipher_type: StageKind) -> CipherEngine | None:
        """
        Get an engine instance for the specified stage kind.

        Args:
            cipher_type: The kind of stage

        Returns:
            Engine instance or None if not found
        """
        if cipher_type not in self._engines:
            return None

        # Lazy instantiation with caching
        if cipher_type not in self._instances:
            self._instances[cipher_type] = self._engines[cipher_type]()

        return self._instances[cipher_type]

    def get_all_engines(self) -> list[CipherEngine]:
        """
        Get all registered engines.

        Returns:
            List of all engine instances
        """
        return [
            self.get_engine(cipher_type)
            for cipher_type in self._engines
            if self.get_engine(cipher_type) is not None
        ]


# Import engines to trigger registration
def _load_engines() -> None:
    """Load all engine modules to trigger registration."""
    from app.services.engines.polyalphabetic import vigenere  # noqa: F401
    from app.services.engines.symmetric import aes  # noqa: F401
    from app.services.engines.transposition import rail_fence  # noqa: F401


# Load engines when module is imported
_load_engines()
