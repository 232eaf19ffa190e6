#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py [business_id] [--customer ID]

What it does:
- Opens a BookingFlowController through the project wiring
- Prints the current step with its choices
- Lets you pick options, move forward/back, and book
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stilo.application.use_cases.booking_flow import BookingFlowController  # noqa: E402
from stilo.domain.entities.booking_draft import BookingStep  # noqa: E402
from stilo.infrastructure.memory.seed_data import DEMO_BUSINESS_ID  # noqa: E402
from stilo.wiring.dependencies import build_booking_controller  # noqa: E402


def _print_step(controller: BookingFlowController) -> None:
    view = controller.view()
    print("\n" + "-" * 60)
    print(f"{view.business_name or view.business_id} | step: {view.step.value} ({int(view.progress * 100)}%)")
    if view.notice:
        print(f"notice: {view.notice}")
    if view.error:
        print(f"error: {view.error}")

    if view.step == BookingStep.service:
        for s in view.services:
            marker = "*" if s.id == view.service_id else " "
            print(f" {marker} {s.id}: {s.name} ({s.duration_minutes} min) ${s.price}")
    elif view.step == BookingStep.staff:
        print(f" {'*' if view.staff_id == 'any' else ' '} any: Any Professional")
        for m in view.staff:
            print(f" {'*' if m.id == view.staff_id else ' '} {m.id}: {m.name}")
    elif view.step == BookingStep.date_time:
        print(" dates: " + ", ".join(d.isoformat() for d in view.dates))
        if view.date:
            print(f" date: {view.date.isoformat()}")
            print(" slots: " + (", ".join(view.slots) if view.slots else "No available slots for this date."))
    elif view.step == BookingStep.review and view.summary:
        s = view.summary
        print(f" {s.service_name} | ${s.price} | {s.duration_minutes} min")
        print(f" {s.staff_label}")
        print(f" {s.date_label} {s.time_label}")
    elif view.step == BookingStep.auth_interrupt:
        print(f" sign in at: {view.auth_redirect}")
    elif view.step == BookingStep.confirmation and view.reservation:
        print(f" booked: {view.reservation.id} at {view.reservation.start.isoformat()}")

    print("Commands: pick <value>, next, back, quit")


async def _run(business_id: str, customer: str | None) -> None:
    controller = build_booking_controller(business_id, access_token=customer)
    await controller.load()

    while True:
        _print_step(controller)
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        command, _, arg = line.partition(" ")
        arg = arg.strip()

        if command in ("quit", "/quit"):
            break
        if command == "next":
            await controller.go_forward()
        elif command == "back":
            await controller.go_back()
        elif command == "pick" and arg:
            step = controller.step
            if step == BookingStep.service:
                ok = controller.select_service(arg)
            elif step == BookingStep.staff:
                ok = controller.select_staff(arg)
            elif step == BookingStep.date_time and _looks_like_date(arg):
                ok = await controller.select_date(date.fromisoformat(arg))
            elif step == BookingStep.date_time:
                ok = controller.select_time(arg)
            else:
                ok = False
            if not ok:
                print(f"Cannot pick {arg!r} here.")
        else:
            print("Unknown command.")

    controller.exit()


def _looks_like_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Walk through the booking wizard locally.")
    parser.add_argument("business_id", nargs="?", default=DEMO_BUSINESS_ID)
    parser.add_argument("--customer", default=None, help="customer id to book as (omit to stay signed out)")
    args = parser.parse_args()
    asyncio.run(_run(args.business_id, args.customer))


if __name__ == "__main__":
    main()
