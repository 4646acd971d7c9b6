"""
Stage set - the fixed, orderable collection of pipeline stages.

One StageConfig exists per stage kind. Positions always form a permutation
of 1..N; moving a stage swaps its position with its neighbour's so the set
never holds duplicates or gaps.
"""

from typing import Any, Iterable, Literal

from pydantic import ValidationError as PydanticValidationError

from app.core.config import get_settings
from app.core.exceptions import InvalidParamError, InvalidStageSetError
from app.models.schemas import (
    StageConfig,
    StageKind,
    StrongCipherParams,
    SubstitutionParams,
    TranspositionParams,
)


class StageSet:
    """
    Mutable holder of the stage configurations for one session.

    Runs never see this object directly: they receive ``snapshot()``, an
    immutable tuple of copies taken at the start of the run.
    """

    def __init__(self, stages: Iterable[StageConfig]):
        self._stages: dict[StageKind, StageConfig] = {}

        for stage in stages:
            if stage.id in self._stages:
                raise InvalidStageSetError(
                    f"Duplicate stage '{stage.id.value}'",
                    {"stage": stage.id.value},
                )
            self._stages[stage.id] = stage

        missing = [kind.value for kind in StageKind if kind not in self._stages]
        if missing:
            raise InvalidStageSetError(
                f"Missing stages: {', '.join(missing)}",
                {"missing": missing},
            )

        orders = sorted(stage.order for stage in self._stages.values())
        if orders != list(range(1, len(self._stages) + 1)):
            raise InvalidStageSetError(
                "Stage orders must be a permutation of 1..N",
                {"orders": orders},
            )

    @classmethod
    def default(cls) -> "StageSet":
        """AES first and enabled; Vigenère and Rail Fence after it, disabled."""
        settings = get_settings()

        return cls([
            StageConfig(
                id=StageKind.STRONG_CIPHER,
                enabled=True,
                order=1,
                params=StrongCipherParams(key=settings.default_aes_key),
            ),
            StageConfig(
                id=StageKind.SUBSTITUTION,
                enabled=False,
                order=2,
                params=SubstitutionParams(key=settings.default_vigenere_key),
            ),
            StageConfig(
                id=StageKind.TRANSPOSITION,
                enabled=False,
                order=3,
                params=TranspositionParams(rails=settings.default_rails),
            ),
        ])

    def __len__(self) -> int:
        return len(self._stages)

    def get(self, kind: StageKind) -> StageConfig:
        return self._stages[kind]

    def ordered(self) -> list[StageConfig]:
        """All stages by ascending position."""
        return sorted(self._stages.values(), key=lambda stage: stage.order)

    def active(self) -> list[StageConfig]:
        """Enabled stages by ascending position."""
        return [stage for stage in self.ordered() if stage.enabled]

    def toggle(self, kind: StageKind) -> StageConfig:
        stage = self._stages[kind]
        stage.enabled = not stage.enabled
        return stage

    def set_enabled(self, kind: StageKind, enabled: bool) -> StageConfig:
        stage = self._stages[kind]
        stage.enabled = enabled
        return stage

    def move(self, kind: StageKind, direction: Literal["up", "down"]) -> None:
        """
        Swap a stage's position with the stage before ("up") or after ("down") it.

        Moving the first stage up or the last stage down does nothing.
        """
        ordered = self.ordered()
        index = next(i for i, stage in enumerate(ordered) if stage.id == kind)
        new_index = index - 1 if direction == "up" else index + 1

        if new_index < 0 or new_index >= len(ordered):
            return

        current, neighbour = ordered[index], ordered[new_index]
        current.order, neighbour.order = neighbour.order, current.order

    def update_params(self, kind: StageKind, **changes: Any) -> StageConfig:
        """
        Replace some parameters of a stage, validating the result.

        Raises:
            InvalidParamError: If the new parameters violate a constraint
        """
        stage = self._stages[kind]
        data = stage.params.model_dump()
        data.update(changes)

        try:
            stage.params = type(stage.params).model_validate(data)
        except PydanticValidationError as e:
            error = e.errors()[0]
            param = ".".join(str(part) for part in error["loc"]) or "params"
            raise InvalidParamError(stage.name, param, error["msg"]) from e

        return stage

    def snapshot(self) -> tuple[StageConfig, ...]:
        """Copies of all stages by position, safe to hand to a run."""
        return tuple(stage.model_copy(deep=True) for stage in self.ordered())
