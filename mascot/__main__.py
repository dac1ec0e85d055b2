"""Mascot demo CLI.

Submits one email address through the signup form and prints every
observable state change of the celebration.

Usage:
    python -m mascot a@b.co                   # authored speed
    python -m mascot a@b.co --time-scale 0.1  # 10x faster
    python -m mascot a@b.co --no-anchor       # precondition failure
    python -m mascot not-an-email             # validation failure
"""

import argparse
import asyncio
import sys

from mascot.app import MascotApp
from mascot.config.settings import Settings
from mascot.observability.logging import configure_logging
from mascot.orchestrator.state import PhaseTransition, VisualAnchor


def _print_transition(transition: PhaseTransition) -> None:
    value = transition.new_value
    if hasattr(value, "value"):
        value = value.value
    print(f"  [{transition.t_s:7.3f}s] {transition.field_name:<16} -> {value}")


async def run(email: str, settings: Settings, anchor_present: bool) -> int:
    app = MascotApp(settings, anchor=VisualAnchor(mounted=anchor_present))
    app.state.on_state_change(_print_transition)

    async with app:
        print(f"\nSubmitting {email!r}")
        completed = await app.submit(email)

    if app.form.error:
        print(f"\nError: {app.form.error}")
    print(f"\nCompleted: {completed}  blinks: {len(app.blinks)}  button: {app.form.button_label}")
    return 0 if completed else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Mascot celebration demo")
    parser.add_argument("email", type=str, help="Email address to submit")
    parser.add_argument(
        "--time-scale",
        type=float,
        default=None,
        help="Real seconds per authored second (default from MASCOT_TIME_SCALE)",
    )
    parser.add_argument(
        "--no-anchor", action="store_true", help="Run without a mounted visual anchor"
    )
    parser.add_argument("--json-logs", action="store_true", help="Render logs as JSON")

    args = parser.parse_args()

    overrides = {}
    if args.time_scale is not None:
        overrides["time_scale"] = args.time_scale
    if args.json_logs:
        overrides["log_json"] = True
    settings = Settings(**overrides)

    configure_logging(level=settings.log_level, json_format=settings.log_json)
    sys.exit(asyncio.run(run(args.email, settings, anchor_present=not args.no_anchor)))


if __name__ == "__main__":
    main()
