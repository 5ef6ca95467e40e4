from __future__ import annotations

import logging

from app.application.exceptions import InvalidTransitionError
from app.domain.entities.wizard_step import (
    AUTH_ADVANCE_FROM,
    BACK_TRANSITIONS,
    FORWARD_TRANSITIONS,
    RESTART_TRANSITIONS,
    Step,
)


class StepController:
    """
    Finite-state machine over the wizard steps.

    Only knows which moves are legal; guards that depend on the booking
    session (selection made, submission succeeded) are checked by the caller
    before calling advance().
    """

    def __init__(self, authenticated: bool = False) -> None:
        self._step = Step.PROFESSIONALS if authenticated else Step.WELCOME
        self._logger = logging.getLogger(__name__)

    @property
    def step(self) -> Step:
        return self._step

    def require(self, *steps: Step) -> None:
        if self._step not in steps:
            expected = ", ".join(s.value for s in steps)
            raise InvalidTransitionError(f"Action not available on step {self._step.value} (expected {expected})")

    def can_advance(self, target: Step) -> bool:
        return target in FORWARD_TRANSITIONS.get(self._step, frozenset())

    def advance(self, target: Step) -> bool:
        """Move forward. Returns True when the move restarts the flow."""
        if not self.can_advance(target):
            raise InvalidTransitionError(f"Cannot go from {self._step.value} to {target.value}")
        restarts = (self._step, target) in RESTART_TRANSITIONS
        self._move(target, reason="forward")
        return restarts

    def back(self) -> Step:
        target = BACK_TRANSITIONS.get(self._step)
        if target is None:
            raise InvalidTransitionError(f"No previous step from {self._step.value}")
        self._move(target, reason="back")
        return target

    def advance_on_authentication(self) -> bool:
        """Jump to professionals after a sign-in event. Returns True if the step changed."""
        if self._step not in AUTH_ADVANCE_FROM:
            return False
        self._move(Step.PROFESSIONALS, reason="auth_event")
        return True

    def _move(self, target: Step, reason: str) -> None:
        previous = self._step
        self._step = target
        self._logger.info(
            "Wizard step changed",
            extra={"step": target.value, "reason": f"{reason} from {previous.value}"},
        )
