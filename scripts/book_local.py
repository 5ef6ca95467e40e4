#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py

Drives the same BookingWizard the API uses, against the in-memory store and
mock auth seeded with the demo salon. Type a command per line:

  start | back | restart | bookings | refresh
  signup <name>;<email>;<phone>;<password>
  signin <email> <password>
  continue
  pro <id> | service <id>
  date YYYY-MM-DD | time HH:MM
  notes <text> | submit | skip
  /quit
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.exceptions import (  # noqa: E402
    InvalidSelectionError,
    InvalidTransitionError,
    SubmissionInProgressError,
)
from app.application.use_cases.booking_wizard import BookingWizard  # noqa: E402
from app.domain.entities.wizard_step import Step  # noqa: E402
from app.wiring.dependencies import create_wizard  # noqa: E402


def _print_view(wizard: BookingWizard) -> None:
    view = wizard.view()
    print("\n" + "-" * 60)
    print(f"step: {view.step.value} ({view.progress}%)")
    if view.greeting_name:
        print(f"Hello, {view.greeting_name}!")
    session = view.session
    if session.professional:
        print(f"professional: {session.professional.name}")
    if session.service:
        print(f"service: {session.service.name} ({session.service.duration_minutes} min, {session.service.price})")
    if session.date:
        print(f"date: {session.date.isoformat()}  time: {session.time or '-'}")
    if session.notes:
        print(f"notes: {session.notes}")

    if view.step == Step.PROFESSIONALS:
        for p in view.professionals:
            print(f"  [{p.id}] {p.name} - {p.specialty}")
    elif view.step == Step.SERVICES:
        for s in view.services:
            print(f"  [{s.id}] {s.name} - {s.duration_minutes} min - {s.price}")
    elif view.step == Step.DATETIME and view.time_slots:
        print("  slots: " + " ".join(view.time_slots))
    elif view.step == Step.MY_BOOKINGS:
        if not view.bookings:
            print("  (no bookings)")
        for a in view.bookings:
            print(f"  {a.date.isoformat()} {a.time} professional={a.professional_id} service={a.service_id}")

    for notice in wizard.notifier.drain():
        print(f"[{notice.level}] {notice.title}: {notice.message}")
    print("-" * 60)


async def _dispatch(wizard: BookingWizard, line: str) -> None:
    cmd, _, arg = line.partition(" ")
    cmd = cmd.lower()
    arg = arg.strip()

    if cmd == "start":
        await wizard.start()
    elif cmd == "back":
        await wizard.back()
    elif cmd == "restart":
        wizard.restart()
    elif cmd == "bookings":
        await wizard.view_my_bookings()
    elif cmd == "refresh":
        await wizard.refresh_bookings()
    elif cmd == "signup":
        name, email, phone, password = (arg.split(";") + ["", "", "", ""])[:4]
        await wizard.sign_up(name, email, phone, password)
    elif cmd == "signin":
        email, _, password = arg.partition(" ")
        await wizard.sign_in(email, password)
    elif cmd == "continue":
        await wizard.continue_authenticated()
    elif cmd == "pro":
        await wizard.select_professional(arg)
    elif cmd == "service":
        await wizard.select_service(arg)
    elif cmd == "date":
        wizard.choose_date(date.fromisoformat(arg))
    elif cmd == "time":
        wizard.choose_time(arg)
    elif cmd == "notes":
        wizard.set_notes(arg)
    elif cmd == "submit":
        await wizard.submit()
    elif cmd == "skip":
        await wizard.skip_notes()
    else:
        print(f"Unknown command: {cmd} (see module docstring)")


async def main() -> None:
    wizard = await create_wizard("local")
    _print_view(wizard)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if not line:
            continue
        if line.lower() in ("/quit", "/exit"):
            print("Bye!")
            break

        try:
            await _dispatch(wizard, line)
        except (InvalidTransitionError, InvalidSelectionError, SubmissionInProgressError) as e:
            print(f"ERROR: {e}")
        except ValueError as e:
            print(f"ERROR: bad input ({e})")
        _print_view(wizard)

    wizard.close()


if __name__ == "__main__":
    asyncio.run(main())
