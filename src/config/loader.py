"""Configuration loader with validation and state machine."""

import hashlib
import time
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from src.config.constants import COMPONENT_CONFIG
from src.config.effective import EffectiveConfig
from src.config.schemas.search import SearchConfig
from src.config.state_machine import ConfigState, ConfigStateMachine


logger = structlog.get_logger()


class ConfigLoader:
    """Loads and validates the search configuration file.

    Implements a state machine for configuration loading:
    UNLOADED -> LOADING -> VALIDATED -> READY

    Any failure moves the loader to FAILED, records the problems in
    ``validation_errors`` and re-raises the original exception.
    """

    def __init__(self, run_id: str) -> None:
        """Initialize the loader.

        Args:
            run_id: Unique identifier for the current run.
        """
        self._run_id = run_id
        self._state_machine = ConfigStateMachine()
        self._file_checksum: str | None = None
        self._validation_errors: list[dict[str, str]] = []
        self._validation_duration_ms: float = 0

    @property
    def state(self) -> ConfigState:
        """Get the current loader state."""
        return self._state_machine.state

    @property
    def file_checksum(self) -> str | None:
        """SHA-256 checksum of the loaded file, once read."""
        return self._file_checksum

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get validation errors if any."""
        return self._validation_errors.copy()

    @property
    def validation_duration_ms(self) -> float:
        """Get validation duration in milliseconds."""
        return self._validation_duration_ms

    def _load_yaml_file(self, file_path: Path) -> tuple[object, str]:
        """Load a YAML file and compute its checksum.

        Args:
            file_path: Path to the YAML file.

        Returns:
            Tuple of (parsed content, checksum).

        Raises:
            FileNotFoundError: If file does not exist.
            yaml.YAMLError: If YAML parsing fails.
        """
        content_bytes = file_path.read_bytes()
        checksum = hashlib.sha256(content_bytes).hexdigest()
        parsed: object = yaml.safe_load(content_bytes.decode("utf-8")) or {}
        return parsed, checksum

    def load(self, config_path: Path) -> EffectiveConfig:
        """Load and validate the configuration file.

        Args:
            config_path: Path to config.yaml.

        Returns:
            EffectiveConfig wrapping the validated SearchConfig.

        Raises:
            ValidationError: If the content does not match the schema.
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            ConfigStateError: If called in invalid state.
        """
        start_time = time.perf_counter()
        self._state_machine.transition(ConfigState.LOADING)

        log = logger.bind(
            run_id=self._run_id,
            component=COMPONENT_CONFIG,
            phase="LOADING",
        )

        try:
            log.info("loading_config_file", file_path=str(config_path))
            data, checksum = self._load_yaml_file(config_path)
            self._file_checksum = checksum
            search = SearchConfig.model_validate(data)

            self._state_machine.transition(ConfigState.VALIDATED)
            self._validation_duration_ms = (time.perf_counter() - start_time) * 1000
            log.info(
                "config_validation_complete",
                phase="VALIDATED",
                file_sha256=checksum,
                validation_error_count=0,
                config_validation_duration_ms=self._validation_duration_ms,
            )

            effective = EffectiveConfig(
                search=search,
                source_path=str(config_path.resolve()),
                file_checksum=checksum,
                run_id=self._run_id,
            )

            self._state_machine.transition(ConfigState.READY)
            log.info("config_ready", phase="READY", states=self._state_machine.history)

            return effective

        except ValidationError as e:
            self._handle_validation_error(e, log)
            raise

        except FileNotFoundError as e:
            self._fail("file", str(e), "file_not_found", log)
            raise

        except yaml.YAMLError as e:
            self._fail("yaml", str(e), "yaml_parse_error", log)
            raise

    def _handle_validation_error(
        self,
        error: ValidationError,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        """Handle Pydantic validation error."""
        self._state_machine.transition(ConfigState.FAILED)

        for err in error.errors():
            self._validation_errors.append(
                {
                    "loc": ".".join(str(loc) for loc in err["loc"]) or "root",
                    "msg": err["msg"],
                    "type": err["type"],
                }
            )

        log.error(
            "config_validation_failed",
            phase="FAILED",
            failed_from=self._failed_from(),
            validation_error_count=len(self._validation_errors),
            errors=self._validation_errors,
        )

    def _fail(
        self,
        loc: str,
        message: str,
        error_type: str,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        """Record a file level failure."""
        self._state_machine.transition(ConfigState.FAILED)
        self._validation_errors.append({"loc": loc, "msg": message, "type": error_type})
        log.error(
            "config_load_failed",
            phase="FAILED",
            failed_from=self._failed_from(),
            error_type=error_type,
            error=message,
        )

    def _failed_from(self) -> str | None:
        state = self._state_machine.failed_from
        return state.name if state is not None else None

    def get_validation_summary(self) -> dict[str, object]:
        """Get a summary of the validation process.

        Returns:
            Dictionary with validation summary.
        """
        return {
            "run_id": self._run_id,
            "state": self._state_machine.state.name,
            "states": self._state_machine.history,
            "failed_from": self._failed_from(),
            "file_checksum": self._file_checksum,
            "validation_error_count": len(self._validation_errors),
            "validation_errors": self._validation_errors,
            "validation_duration_ms": self._validation_duration_ms,
        }
