import pytest
from pydantic import ValidationError

from chunkscribe.models.chunk import ByDuration, Combined
from chunkscribe.models.config import ChunkingConfig, EmptyChunkPolicy, Settings, load_settings


def test_defaults_without_config_file(tmp_path):
    settings = load_settings(tmp_path)

    assert settings.chunking.overlap_seconds == 5
    assert settings.budget.force_below == 30
    assert isinstance(settings.limits_for("openai"), Combined)
    assert settings.limits_for("whisper") == ByDuration(max_seconds=7200)


def test_yaml_overrides(tmp_path):
    (tmp_path / "chunkscribe.yaml").write_text(
        "chunking:\n"
        "  overlap_seconds: 2\n"
        "  grow_factor: 1.2\n"
        "processing:\n"
        "  empty_chunk_policy: fail\n"
        "engine_limits:\n"
        "  whisper:\n"
        "    kind: duration\n"
        "    max_seconds: 600\n"
    )

    settings = load_settings(tmp_path)

    assert settings.chunking.overlap_seconds == 2
    assert settings.chunking.grow_factor == 1.2
    assert settings.processing.empty_chunk_policy is EmptyChunkPolicy.FAIL
    assert settings.limits_for("whisper") == ByDuration(max_seconds=600)


def test_unknown_engine_limits_fall_back():
    settings = Settings(engine_limits={"not_configured": ByDuration(max_seconds=900)})
    assert settings.limits_for("aws_transcribe").max_seconds == 900


def test_factor_bounds_are_validated():
    with pytest.raises(ValidationError):
        ChunkingConfig(overflow_shrink=1.5)
