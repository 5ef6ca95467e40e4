from __future__ import annotations

from enum import Enum


class Step(str, Enum):
    WELCOME = "welcome"
    LOGIN = "login"
    PROFESSIONALS = "professionals"
    SERVICES = "services"
    DATETIME = "datetime"
    NOTES = "notes"
    CONFIRMATION = "confirmation"
    MY_BOOKINGS = "myBookings"


# Transitions caused by the user completing a step.
FORWARD_TRANSITIONS: dict[Step, frozenset[Step]] = {
    Step.WELCOME: frozenset({Step.LOGIN}),
    Step.LOGIN: frozenset({Step.PROFESSIONALS}),
    Step.PROFESSIONALS: frozenset({Step.SERVICES}),
    Step.SERVICES: frozenset({Step.DATETIME}),
    Step.DATETIME: frozenset({Step.NOTES}),
    Step.NOTES: frozenset({Step.CONFIRMATION}),
    Step.CONFIRMATION: frozenset({Step.MY_BOOKINGS, Step.WELCOME}),
    Step.MY_BOOKINGS: frozenset({Step.WELCOME}),
}

# Back buttons. Never touch the booking session.
BACK_TRANSITIONS: dict[Step, Step] = {
    Step.LOGIN: Step.WELCOME,
    Step.PROFESSIONALS: Step.LOGIN,
    Step.SERVICES: Step.PROFESSIONALS,
    Step.DATETIME: Step.SERVICES,
    Step.NOTES: Step.DATETIME,
}

# Steps an auth-state-change event may jump away from.
AUTH_ADVANCE_FROM: frozenset[Step] = frozenset({Step.WELCOME, Step.LOGIN})

# Forward transitions that discard the booking session.
RESTART_TRANSITIONS: frozenset[tuple[Step, Step]] = frozenset(
    {
        (Step.CONFIRMATION, Step.WELCOME),
        (Step.MY_BOOKINGS, Step.WELCOME),
    }
)

PROGRESS_PERCENT: dict[Step, int] = {
    Step.WELCOME: 0,
    Step.LOGIN: 20,
    Step.PROFESSIONALS: 40,
    Step.SERVICES: 60,
    Step.DATETIME: 80,
    Step.NOTES: 100,
    Step.CONFIRMATION: 100,
    Step.MY_BOOKINGS: 100,
}
