"""
================================================================================
Recipes - Building and Replaying Device Action Sequences
================================================================================

A recipe is an ordered list of actions (connect/disconnect the device,
sleep/wake it, start/stop flicker detection, wait). The executor replays it
strictly in order, one action at a time, pausing briefly after every step
so the device and the detector can settle.

Design Philosophy:
    "Focus is about saying no." - Steve Jobs

Failure Policy:
    The first failing step aborts the rest of the recipe. Steps that already
    ran are not undone and nothing is retried.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from .errors import CommandError, MonitorError, RecipeAbort, SessionError
from .models import Action, ActionType, RecipeRunState
from .ports import ActuatorPort, SessionControl
from ..utils.constants import SETTLE_INTERVAL_S

LOGGER = logging.getLogger(__name__)

ALREADY_RUNNING = "Recipe already running"


class Recipe:
    """
    An incrementally built, ordered list of recipe actions.

    Example:
        >>> recipe = Recipe()
        >>> recipe.add(Action(ActionType.CONNECT_DEVICE))
        >>> recipe.add_delay(5)
        >>> [a.label for a in recipe]
        ['connectUSB', 'delay (5s)']
    """

    def __init__(self, actions: Iterable[Action] = ()):
        self._actions: List[Action] = list(actions)

    def add(self, action: Action) -> None:
        self._actions.append(action)

    def add_delay(self, seconds: float) -> None:
        self._actions.append(Action.delay(seconds))

    def remove(self, index: int) -> Action:
        return self._actions.pop(index)

    def clear(self) -> None:
        self._actions.clear()

    def snapshot(self) -> Tuple[Action, ...]:
        """Immutable copy of the steps, as executed."""
        return tuple(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions)

    def __getitem__(self, index: int) -> Action:
        return self._actions[index]


@dataclass(frozen=True)
class RecipeResult:
    """
    Outcome of one recipe run.

    Attributes:
        completed: True when every step ran
        steps_executed: Number of steps that fully took effect
        total_steps: Number of steps in the recipe
        error: Failure reason, if the recipe was aborted or rejected
        failed_index: Index of the failing step, if any
    """

    completed: bool
    steps_executed: int
    total_steps: int
    error: Optional[str] = None
    failed_index: Optional[int] = None

    @property
    def status(self) -> str:
        """Single status line for the user."""
        if self.completed:
            return "Recipe complete"
        if self.error == ALREADY_RUNNING:
            return ALREADY_RUNNING
        return f"Recipe Error: {self.error}"


class RecipeExecutor:
    """
    Replays recipes sequentially against the device and the session.

    State machine: Idle -> Running -> Idle. Only one recipe can run at a
    time; run() called while running is rejected.

    The ``sleep`` callable performs every timed wait (delays and the settle
    interval). The GUI passes a wait that keeps the Qt event loop running so
    samples keep flowing during a recipe.

    Example:
        >>> executor = RecipeExecutor(link, session)
        >>> result = executor.run(recipe)
        >>> print(result.status)
    """

    def __init__(self, actuator: ActuatorPort, session: SessionControl,
                 sleep: Callable[[float], None] = time.sleep,
                 settle_interval: float = SETTLE_INTERVAL_S,
                 on_step: Optional[Callable[[int, Action], None]] = None):
        """
        Initialize the executor.

        Args:
            actuator: Sends device commands (c, d, s, w)
            session: Starts/stops flicker detection
            sleep: Wait function taking seconds
            settle_interval: Pause after every step, in seconds
            on_step: Called with (index, action) before each step runs
        """
        self.actuator = actuator
        self.session = session
        self.settle_interval = settle_interval
        self.on_step = on_step
        self.state = RecipeRunState()
        self._sleep = sleep

    @property
    def is_running(self) -> bool:
        return self.state.running

    def run(self, recipe: Iterable[Action]) -> RecipeResult:
        """
        Execute every step of ``recipe`` in order.

        Args:
            recipe: A Recipe or any iterable of Action

        Returns:
            RecipeResult describing completion or the abort reason
        """
        if self.state.running:
            LOGGER.warning(ALREADY_RUNNING)
            return RecipeResult(False, 0, 0, error=ALREADY_RUNNING)

        steps = recipe.snapshot() if isinstance(recipe, Recipe) else tuple(recipe)
        self.state.running = True
        executed = 0
        LOGGER.info("Running recipe with %d steps", len(steps))

        try:
            for index, action in enumerate(steps):
                self.state.current_index = index
                if self.on_step is not None:
                    self.on_step(index, action)
                self._run_step(index, action)
                executed += 1
        except RecipeAbort as e:
            LOGGER.error("Recipe aborted at step %d (%s): %s", e.index, e.action.label, e.reason)
            return RecipeResult(False, executed, len(steps), error=e.reason, failed_index=e.index)
        finally:
            self.state.running = False
            self.state.current_index = None

        LOGGER.info("Recipe complete")
        return RecipeResult(True, executed, len(steps))

    def _run_step(self, index: int, action: Action) -> None:
        """Run one action plus the settle pause, converting failures to RecipeAbort."""
        LOGGER.info("Recipe step %d: %s", index + 1, action.label)
        try:
            self._execute(action)
        except MonitorError as e:
            raise RecipeAbort(str(e), index, action) from e
        except Exception as e:
            LOGGER.exception("Unexpected failure in recipe step %d", index + 1)
            raise RecipeAbort(str(e) or type(e).__name__, index, action) from e

        self._sleep(self.settle_interval)

    def _execute(self, action: Action) -> None:
        if action.type is ActionType.START_FLICKER:
            if self.session.is_active:
                LOGGER.debug("Flicker detection already running")
                return
            self.session.start_session().raise_for_failure(SessionError)

        elif action.type is ActionType.END_FLICKER:
            if not self.session.is_active:
                LOGGER.debug("Flicker detection not running")
                return
            self.session.stop_session().raise_for_failure(SessionError)

        elif action.type is ActionType.DELAY:
            self._sleep(action.duration)

        else:
            self.actuator.send_command(action.command).raise_for_failure(CommandError)
