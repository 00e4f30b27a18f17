"""Basic smoke tests for project wiring."""

from pathlib import Path

from typer.testing import CliRunner

from notevoice import __version__
from notevoice.cli import app
from notevoice.config import NotevoiceConfig
from notevoice.io.storage import VaultStore
from notevoice.pipeline import NotevoicePipeline


def test_pipeline_can_be_instantiated(tmp_path: Path) -> None:
    """Pipeline class should be constructible with a vault store."""

    pipeline = NotevoicePipeline(VaultStore(tmp_path))
    assert pipeline is not None


def test_config_dataclass_defaults() -> None:
    """Config should keep expected defaults."""

    config = NotevoiceConfig(vault_root=Path("."))
    assert config.active_backend == "xai"
    assert config.audio_dir == "Audio"
    assert config.summarization_threshold == 2000
    assert config.max_chunk_chars > 0
    assert __version__ == "0.1.0"


def test_cli_help_lists_commands() -> None:
    """The CLI should expose its commands in help output."""

    result = CliRunner().invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("generate", "validate-keys", "voices", "backends", "preprocess", "credentials"):
        assert command in result.output
