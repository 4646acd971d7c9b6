"""Tests for the pipeline orchestrator."""

import pytest

from app.core.config import Settings
from app.core.exceptions import (
    DecryptionError,
    EmptyInputError,
    InputTooLongError,
    InvalidParamError,
    NoStagesSelectedError,
    StageFailedError,
)
from app.models.schemas import (
    Mode,
    StageConfig,
    StageKind,
    StrongCipherParams,
    SubstitutionParams,
    TranspositionParams,
)
from app.services.engines.polyalphabetic.vigenere import VigenereEngine
from app.services.engines.transposition.rail_fence import RailFenceEngine
from app.services.pipeline.orchestrator import PipelineOrchestrator, StepRecord
from app.services.pipeline.stages import StageSet


def _stages(aes=(True, 1), vigenere=(True, 2), rail_fence=(True, 3), key="LEMON", rails=3):
    return [
        StageConfig(
            id=StageKind.STRONG_CIPHER,
            enabled=aes[0],
            order=aes[1],
            params=StrongCipherParams(key="my-secret-key"),
        ),
        StageConfig(
            id=StageKind.SUBSTITUTION,
            enabled=vigenere[0],
            order=vigenere[1],
            params=SubstitutionParams(key=key),
        ),
        StageConfig(
            id=StageKind.TRANSPOSITION,
            enabled=rail_fence[0],
            order=rail_fence[1],
            params=TranspositionParams(rails=rails),
        ),
    ]


class TestPipelineValidation:
    """Validation happens before any stage runs."""

    @pytest.fixture
    def orchestrator(self):
        return PipelineOrchestrator()

    @pytest.mark.parametrize("text", ["", "   ", "\n\t "])
    def test_empty_input(self, orchestrator, text):
        outcome = orchestrator.run(text, Mode.ENCRYPT, _stages())

        assert not outcome.ok
        assert outcome.result is None
        assert isinstance(outcome.error, EmptyInputError)

    def test_no_stages_selected(self, orchestrator):
        stages = _stages(aes=(False, 1), vigenere=(False, 2), rail_fence=(False, 3))
        outcome = orchestrator.run("hello", Mode.ENCRYPT, stages)

        assert isinstance(outcome.error, NoStagesSelectedError)

    def test_empty_input_reported_before_no_stages(self, orchestrator):
        stages = _stages(aes=(False, 1), vigenere=(False, 2), rail_fence=(False, 3))
        outcome = orchestrator.run(" ", Mode.ENCRYPT, stages)

        assert isinstance(outcome.error, EmptyInputError)

    def test_input_too_long(self):
        orchestrator = PipelineOrchestrator(settings=Settings(max_input_length=10))
        outcome = orchestrator.run("x" * 11, Mode.ENCRYPT, _stages())

        assert isinstance(outcome.error, InputTooLongError)
        assert outcome.error.details == {"length": 11, "max_length": 10}

    def test_invalid_rails_rejected_at_run_time(self, orchestrator):
        stages = _stages(aes=(False, 1), vigenere=(False, 2))
        stages[2] = StageConfig.model_construct(
            id=StageKind.TRANSPOSITION,
            name="Rail Fence",
            enabled=True,
            order=3,
            params=TranspositionParams.model_construct(rails=25),
        )

        outcome = orchestrator.run("hello", Mode.ENCRYPT, stages)

        assert isinstance(outcome.error, InvalidParamError)
        assert outcome.error.stage_name == "Rail Fence"
        assert outcome.error.param == "rails"

    def test_unwrap_raises_error(self, orchestrator):
        outcome = orchestrator.run("", Mode.ENCRYPT, _stages())

        with pytest.raises(EmptyInputError):
            outcome.unwrap()


class TestPipelineExecution:
    """Stage chaining, ordering and the trace."""

    @pytest.fixture
    def orchestrator(self):
        return PipelineOrchestrator(reverse_on_decrypt=False)

    def test_three_stage_trace_chains(self, orchestrator):
        outcome = orchestrator.run("Attack at dawn!", Mode.ENCRYPT, _stages())
        result = outcome.unwrap()

        assert outcome.ok
        assert [step.algorithm_name for step in result.trace] == ["AES", "Vigenère", "Rail Fence"]
        assert result.trace[0].input == "Attack at dawn!"
        assert result.trace[0].output == result.trace[1].input
        assert result.trace[1].output == result.trace[2].input
        assert result.trace[2].output == result.final_output
        assert result.message == "Encryption successful!"

    def test_stages_run_in_order_field_sequence(self, orchestrator):
        stages = _stages(aes=(False, 3), vigenere=(True, 2), rail_fence=(True, 1))
        result = orchestrator.run("WEAREDISCOVEREDFLEEATONCE", Mode.ENCRYPT, stages).unwrap()

        expected = VigenereEngine().encrypt(
            RailFenceEngine().encrypt("WEAREDISCOVEREDFLEEATONCE", TranspositionParams(rails=3)),
            SubstitutionParams(key="LEMON"),
        )
        assert [step.algorithm_name for step in result.trace] == ["Rail Fence", "Vigenère"]
        assert result.final_output == expected

    def test_input_is_not_trimmed(self, orchestrator):
        stages = _stages(aes=(False, 1), vigenere=(False, 2), rail_fence=(True, 3))
        result = orchestrator.run("  ab  ", Mode.ENCRYPT, stages).unwrap()

        assert result.trace[0].input == "  ab  "

    def test_decrypt_keeps_ascending_order(self, orchestrator):
        stages = _stages(aes=(False, 1))
        ciphertext = orchestrator.run("Meet me at noon", Mode.ENCRYPT, stages).unwrap().final_output

        result = orchestrator.run(ciphertext, Mode.DECRYPT, stages).unwrap()

        expected = RailFenceEngine().decrypt(
            VigenereEngine().decrypt(ciphertext, SubstitutionParams(key="LEMON")),
            TranspositionParams(rails=3),
        )
        assert [step.algorithm_name for step in result.trace] == ["Vigenère", "Rail Fence"]
        assert result.final_output == expected
        assert result.message == "Decryption successful!"

    def test_single_stage_decrypt_inverts_encrypt(self, orchestrator):
        stages = _stages(vigenere=(False, 2), rail_fence=(False, 3))
        ciphertext = orchestrator.run("secret plans", Mode.ENCRYPT, stages).unwrap().final_output

        assert orchestrator.run(ciphertext, Mode.DECRYPT, stages).unwrap().final_output == "secret plans"

    @pytest.mark.parametrize(
        "text",
        ["Attack at dawn!", "Meet me at the Old Mill, 9:45pm", "héllo wörld ✓"],
    )
    def test_reverse_on_decrypt_roundtrip(self, text):
        orchestrator = PipelineOrchestrator(reverse_on_decrypt=True)
        stages = _stages()

        ciphertext = orchestrator.run(text, Mode.ENCRYPT, stages).unwrap().final_output
        result = orchestrator.run(ciphertext, Mode.DECRYPT, stages).unwrap()

        assert [step.algorithm_name for step in result.trace] == ["Rail Fence", "Vigenère", "AES"]
        assert result.final_output == text

    def test_run_does_not_mutate_stages(self, orchestrator):
        stage_set = StageSet.default()
        snapshot = stage_set.snapshot()
        before = [stage.model_dump() for stage in snapshot]

        orchestrator.run("hello", Mode.ENCRYPT, snapshot)

        assert [stage.model_dump() for stage in snapshot] == before

    def test_results_are_independent(self, orchestrator):
        stages = _stages(aes=(False, 1))
        first = orchestrator.run("one", Mode.ENCRYPT, stages).unwrap()
        second = orchestrator.run("two", Mode.ENCRYPT, stages).unwrap()

        assert len(first.trace) == len(second.trace) == 2
        assert first.trace[0] == StepRecord("Vigenère", "one", first.trace[0].output)


class TestStageFailure:
    """A failing stage aborts the run with a single error."""

    @pytest.fixture
    def orchestrator(self):
        return PipelineOrchestrator(reverse_on_decrypt=False)

    def test_strong_cipher_decrypt_failure(self, orchestrator):
        outcome = orchestrator.run("not a ciphertext", Mode.DECRYPT, _stages())

        assert not outcome.ok
        assert outcome.result is None
        assert isinstance(outcome.error, StageFailedError)
        assert outcome.error.stage_name == "AES"
        assert isinstance(outcome.error.cause, DecryptionError)

    def test_failure_mid_chain_discards_trace(self, orchestrator):
        stages = _stages(aes=(True, 2), vigenere=(True, 1), rail_fence=(False, 3))
        outcome = orchestrator.run("plain words", Mode.DECRYPT, stages)

        assert outcome.result is None
        assert outcome.error.stage_name == "AES"
        assert outcome.error.details["stage_name"] == "AES"

    def test_wrong_key_fails(self, orchestrator):
        stages = _stages(vigenere=(False, 2), rail_fence=(False, 3))
        ciphertext = orchestrator.run("secret", Mode.ENCRYPT, stages).unwrap().final_output

        stages[0].params = StrongCipherParams(key="another-key")
        outcome = orchestrator.run(ciphertext, Mode.DECRYPT, stages)

        assert isinstance(outcome.error, StageFailedError)


class TestRunStage:
    """Single-engine use outside of a pipeline."""

    @pytest.fixture
    def orchestrator(self):
        return PipelineOrchestrator()

    def test_run_stage_with_params(self, orchestrator):
        result = orchestrator.run_stage(
            StageKind.SUBSTITUTION, "ATTACKATDAWN", Mode.ENCRYPT, {"key": "LEMON"}
        )
        assert result == "LXFOPVEFRNHR"

    def test_run_stage_defaults(self, orchestrator):
        result = orchestrator.run_stage(StageKind.TRANSPOSITION, "WEAREDISCOVEREDFLEEATONCE", Mode.ENCRYPT)
        assert result == "WECRLTEERDSOEEFEAOCAIVDEN"

    def test_run_stage_invalid_params(self, orchestrator):
        with pytest.raises(InvalidParamError):
            orchestrator.run_stage(StageKind.TRANSPOSITION, "text", Mode.ENCRYPT, {"rails": 1})
