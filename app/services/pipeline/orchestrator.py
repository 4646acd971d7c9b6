"""
Pipeline orchestrator - runs text through the enabled cipher stages.

This module implements the core pipeline logic:
1. Validate the input and the stage selection before anything runs
2. Apply enabled stages in ascending order, recording each step
3. Abort on the first failing stage and report it as a single error
"""

from dataclasses import dataclass
from typing import Iterable

from loguru import logger
from pydantic import BaseModel

from app.core.config import Settings, get_settings
from app.core.exceptions import (
    CryptoForgeError,
    EmptyInputError,
    EngineNotFoundError,
    InputTooLongError,
    NoStagesSelectedError,
    StageFailedError,
)
from app.models.schemas import Mode, StageConfig, StageKind
from app.services.engines.base import CipherEngine
from app.services.engines.registry import EngineRegistry


@dataclass(frozen=True)
class StepRecord:
    """Input and output of one executed stage."""

    algorithm_name: str
    input: str
    output: str


@dataclass(frozen=True)
class PipelineResult:
    """Result of a successful pipeline run."""

    final_output: str
    trace: list[StepRecord]
    mode: Mode

    @property
    def message(self) -> str:
        return f"{'Encryption' if self.mode == Mode.ENCRYPT else 'Decryption'} successful!"


@dataclass(frozen=True)
class PipelineOutcome:
    """Either a result or the single error that stopped the run."""

    result: PipelineResult | None = None
    error: CryptoForgeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> PipelineResult:
        """Return the result, raising the stored error if the run failed."""
        if self.error is not None:
            raise self.error
        return self.result


@dataclass
class _PlannedStage:
    config: StageConfig
    engine: CipherEngine
    params: BaseModel


class PipelineOrchestrator:
    """
    Orchestrates a run across the configured cipher stages.

    Stages are applied in ascending ``order`` for both modes. With
    ``reverse_on_decrypt`` enabled, decryption walks the stages in
    descending order instead so a decrypt run undoes an encrypt run.
    """

    def __init__(
        self,
        registry: EngineRegistry | None = None,
        settings: Settings | None = None,
        reverse_on_decrypt: bool | None = None,
    ):
        self.registry = registry or EngineRegistry()
        self.settings = settings or get_settings()
        self.reverse_on_decrypt = (
            self.settings.pipeline_reverse_on_decrypt
            if reverse_on_decrypt is None
            else reverse_on_decrypt
        )

    def run(
        self,
        input_text: str,
        mode: Mode,
        stages: Iterable[StageConfig],
    ) -> PipelineOutcome:
        """
        Run the input through every enabled stage.

        Args:
            input_text: Text fed to the first stage
            mode: Encrypt or decrypt
            stages: Stage configurations; only enabled ones run

        Returns:
            PipelineOutcome holding a PipelineResult, or the validation
            error or StageFailedError that prevented one
        """
        snapshot = tuple(stage.model_copy(deep=True) for stage in stages)

        try:
            plan = self._plan(input_text, mode, snapshot)
        except CryptoForgeError as e:
            logger.warning(f"pipeline rejected: {e.code}")
            return PipelineOutcome(error=e)

        trace: list[StepRecord] = []
        current = input_text

        for step in plan:
            logger.debug(f"stage: {step.config.name} mode={mode.value}")
            try:
                output = step.engine.apply(current, step.params, mode)
            except Exception as e:
                logger.warning(f"stage {step.config.name} failed: {type(e).__name__}")
                return PipelineOutcome(error=StageFailedError(step.config.name, e))

            trace.append(StepRecord(algorithm_name=step.config.name, input=current, output=output))
            current = output

        logger.info(f"pipeline {mode.value} completed with {len(trace)} stage(s)")
        return PipelineOutcome(result=PipelineResult(final_output=current, trace=trace, mode=mode))

    def run_stage(self, kind: StageKind, text: str, mode: Mode, raw_params: dict | None = None) -> str:
        """
        Apply a single engine outside of a pipeline.

        Missing parameters fall back to the engine defaults.

        Raises:
            EngineNotFoundError: If no engine is registered for the kind
            InvalidParamError: If the parameters are invalid
            DecryptionError: If the strong cipher cannot decrypt
        """
        engine, params = self.resolve_stage(kind, raw_params)
        return engine.apply(text, params, mode)

    def resolve_stage(self, kind: StageKind, raw_params: dict | None = None) -> tuple[CipherEngine, BaseModel]:
        """Look up the engine for a kind and merge raw params over its defaults."""
        engine = self._engine_for(kind)
        params = engine.default_params().model_dump()
        params.update(raw_params or {})
        return engine, engine.parse_params(params)

    def _plan(
        self,
        input_text: str,
        mode: Mode,
        stages: tuple[StageConfig, ...],
    ) -> list[_PlannedStage]:
        """Validate the run and resolve engines and params for each enabled stage."""
        if not input_text.strip():
            raise EmptyInputError()

        enabled = sorted(
            (stage for stage in stages if stage.enabled),
            key=lambda stage: stage.order,
        )
        if not enabled:
            raise NoStagesSelectedError()

        if len(input_text) > self.settings.max_input_length:
            raise InputTooLongError(len(input_text), self.settings.max_input_length)

        if mode == Mode.DECRYPT and self.reverse_on_decrypt:
            enabled.reverse()

        plan = []
        for stage in enabled:
            engine = self._engine_for(stage.id)
            params = engine.parse_params(stage.params, stage_name=stage.name)
            plan.append(_PlannedStage(stage, engine, params))
        return plan

    def _engine_for(self, kind: StageKind) -> CipherEngine:
        engine = self.registry.get_engine(kind)
        if engine is None:
            raise EngineNotFoundError(str(kind.value))
        return engine
