"""Unit tests for the configuration loader and state machine."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from src.config.loader import ConfigLoader
from src.config.state_machine import ConfigState, ConfigStateError, ConfigStateMachine


FIXTURES_DIR = Path(__file__).parent.parent.parent / "fixtures" / "config"


class TestConfigLoader:
    """Tests for ConfigLoader."""

    @pytest.mark.unit
    def test_load_fixture(self) -> None:
        """Test loading the sample configuration."""
        loader = ConfigLoader(run_id="test-run")

        effective = loader.load(FIXTURES_DIR / "config.yaml")

        assert loader.state == ConfigState.READY
        assert effective.run_id == "test-run"
        assert effective.search.filter.exclude_names == ["^Jameson"]
        assert effective.search.fetch.retry_policy.max_retries == 2
        assert loader.file_checksum == effective.file_checksum
        assert len(effective.file_checksum) == 64

    @pytest.mark.unit
    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        """Test that an empty document yields the default configuration."""
        path = tmp_path / "config.yaml"
        path.write_text("")

        effective = ConfigLoader(run_id="r").load(path)

        assert effective.search.max_dist == 50.0

    @pytest.mark.unit
    def test_validation_error_recorded(self, tmp_path: Path) -> None:
        """Test that schema errors are recorded with their location."""
        path = tmp_path / "config.yaml"
        path.write_text("max_dist: -3\nfilter:\n  economy:\n    list: []\n")
        loader = ConfigLoader(run_id="r")

        with pytest.raises(ValidationError):
            loader.load(path)

        assert loader.state == ConfigState.FAILED
        locations = {error["loc"] for error in loader.validation_errors}
        assert "max_dist" in locations
        assert "filter.economy.list" in locations

    @pytest.mark.unit
    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing configuration file."""
        loader = ConfigLoader(run_id="r")

        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "nope.yaml")

        assert loader.validation_errors[0]["type"] == "file_not_found"
        summary = loader.get_validation_summary()
        assert summary["state"] == "FAILED"
        assert summary["failed_from"] == "LOADING"
        assert summary["states"] == ["UNLOADED", "LOADING", "FAILED"]

    @pytest.mark.unit
    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test a syntactically broken file."""
        path = tmp_path / "config.yaml"
        path.write_text("max_dist: [unclosed\n")
        loader = ConfigLoader(run_id="r")

        with pytest.raises(yaml.YAMLError):
            loader.load(path)

        assert loader.validation_errors[0]["type"] == "yaml_parse_error"

    @pytest.mark.unit
    def test_loader_is_single_use(self) -> None:
        """Test that a ready loader cannot load again."""
        loader = ConfigLoader(run_id="r")
        loader.load(FIXTURES_DIR / "config.yaml")

        with pytest.raises(ConfigStateError):
            loader.load(FIXTURES_DIR / "config.yaml")


class TestConfigStateMachine:
    """Tests for ConfigStateMachine."""

    @pytest.mark.unit
    def test_happy_path(self) -> None:
        """Test the full transition sequence."""
        machine = ConfigStateMachine()

        for state in (ConfigState.LOADING, ConfigState.VALIDATED, ConfigState.READY):
            machine.transition(state)

        assert machine.state == ConfigState.READY
        assert machine.history == ["UNLOADED", "LOADING", "VALIDATED", "READY"]
        assert machine.failed_from is None

    @pytest.mark.unit
    def test_cannot_skip_validation(self) -> None:
        """Test that READY requires VALIDATED."""
        machine = ConfigStateMachine()
        machine.transition(ConfigState.LOADING)

        with pytest.raises(ConfigStateError):
            machine.transition(ConfigState.READY)

    @pytest.mark.unit
    def test_failed_is_terminal(self) -> None:
        """Test that nothing leaves FAILED."""
        machine = ConfigStateMachine()
        machine.transition(ConfigState.FAILED)

        assert machine.state == ConfigState.FAILED
        assert machine.failed_from == ConfigState.UNLOADED
        assert not machine.can_transition(ConfigState.LOADING)

    @pytest.mark.unit
    def test_failed_from_records_last_good_state(self) -> None:
        """Test that a failure after validation remembers VALIDATED."""
        machine = ConfigStateMachine()
        machine.transition(ConfigState.LOADING)
        machine.transition(ConfigState.VALIDATED)
        machine.transition(ConfigState.FAILED)

        assert machine.failed_from == ConfigState.VALIDATED
        assert machine.history == ["UNLOADED", "LOADING", "VALIDATED", "FAILED"]
