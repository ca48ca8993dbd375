"""Loading states of a configuration file."""

from enum import Enum, auto
from typing import ClassVar


class ConfigState(Enum):
    """Where a loader is in reading one configuration file.

    UNLOADED -> LOADING -> VALIDATED -> READY, with FAILED reachable from
    every state but itself.
    """

    UNLOADED = auto()
    LOADING = auto()
    VALIDATED = auto()
    READY = auto()
    FAILED = auto()


class ConfigStateError(Exception):
    """Raised when a loader is driven out of order, e.g. loaded twice."""

    def __init__(self, from_state: ConfigState, to_state: ConfigState) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition: {from_state.name} -> {to_state.name}"
        )


class ConfigStateMachine:
    """Tracks the states a single-use loader has passed through.

    The visited states are kept so that logs and summaries can show how far
    loading got before it failed.
    """

    VALID_TRANSITIONS: ClassVar[dict[ConfigState, frozenset[ConfigState]]] = {
        ConfigState.UNLOADED: frozenset({ConfigState.LOADING, ConfigState.FAILED}),
        ConfigState.LOADING: frozenset({ConfigState.VALIDATED, ConfigState.FAILED}),
        ConfigState.VALIDATED: frozenset({ConfigState.READY, ConfigState.FAILED}),
        ConfigState.READY: frozenset({ConfigState.FAILED}),
        ConfigState.FAILED: frozenset(),
    }

    def __init__(self) -> None:
        self._visited: list[ConfigState] = [ConfigState.UNLOADED]

    @property
    def state(self) -> ConfigState:
        """Current state."""
        return self._visited[-1]

    @property
    def history(self) -> list[str]:
        """Names of the visited states, oldest first."""
        return [state.name for state in self._visited]

    @property
    def failed_from(self) -> ConfigState | None:
        """State the loader was in when it failed, or None if it has not."""
        if self.state is not ConfigState.FAILED:
            return None
        return self._visited[-2]

    def can_transition(self, to_state: ConfigState) -> bool:
        """Check whether moving to ``to_state`` is allowed."""
        return to_state in self.VALID_TRANSITIONS[self.state]

    def transition(self, to_state: ConfigState) -> None:
        """Move to ``to_state``.

        Raises:
            ConfigStateError: If the move is not allowed from the current state.
        """
        if not self.can_transition(to_state):
            raise ConfigStateError(self.state, to_state)
        self._visited.append(to_state)
