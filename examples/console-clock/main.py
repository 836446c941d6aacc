"""Console Clock - Vana'diel clock and timers in the terminal.

Shows the in-game weekday, time and moon, manages timers in a JSON file,
and runs the polling loop with notifications printed to stdout.

Run:
    uv run python main.py now
    uv run python main.py add-presets
    uv run python main.py add-nm-window "Leaping Lizzy" --tod "2024-05-01 21:30"
    uv run python main.py run
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from vana import (
    AddTimer,
    ClearCalibration,
    ClockConfig,
    DeleteTimer,
    Engine,
    RecordPlaceholderKill,
    SetCalibration,
    SetPresetOffset,
    SetTod,
    ToggleTimer,
    wall_clock_ms,
)
from vana_calendar import WEEKDAYS, calibration_from_snapshot, vana_now, with_moon_anchor
from vana_parse import format_clock, format_countdown, parse_local_datetime
from vana_schedule import preset_targets
from vana_signal import connect_notifier
from vana_store import JsonFileStore
from vana_timer import (
    InvalidInputError,
    new_earth_timer,
    new_moon_step_timer,
    new_nm_lottery_timer,
    new_nm_timed_window_timer,
    new_preset_timer,
    new_weekday_timer,
    next_event,
)

DEFAULT_STORE = Path.home() / ".vana-clock.json"

logger = logging.getLogger("console_clock")


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

class ConsoleNotifier:
    """Prints notifications to stdout."""

    def notify(self, timer_id: str, title: str, body: str, repeat: bool) -> None:
        print(f"\a[{title}] {body}", flush=True)

    def stop(self, timer_id: str) -> None:
        logger.debug("Notification for %s stopped", timer_id)


class LogKeepAwake:
    def set_keep_awake(self, enabled: bool) -> None:
        logger.info("Keep awake %s", "on" if enabled else "off")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _print_now(engine: Engine, now_ms: int) -> None:
    now = vana_now(now_ms, engine.state.calibration)
    print(
        f"{now.weekday.value} {format_clock(now.hour, now.minute)} | "
        f"Moon {now.moon_percent}% {now.moon_direction.value} ({now.moon_phase_name}, step {now.moon_step}) | "
        f"next step in {format_countdown(now.next_moon_step_at_earth_ms - now_ms)}"
    )


def cmd_now(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    _print_now(engine, now_ms)


def cmd_list(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    if not engine.state.timers:
        print("No timers.")
        return
    for timer in engine.state.timers:
        event = next_event(timer, now_ms, engine.state.calibration)
        when = format_countdown(event.due_at_ms - now_ms) if event else "--:--:--"
        flag = "on " if timer.enabled else "off"
        print(f"{timer.id[:8]}  {flag}  {when}  {timer.kind.value:<17} {timer.label}")


def _resolve_id(engine: Engine, prefix: str) -> str:
    matches = [t.id for t in engine.state.timers if t.id.startswith(prefix)]
    if len(matches) != 1:
        raise InvalidInputError(f"{prefix!r} matches {len(matches)} timers")
    return matches[0]


def cmd_add_weekday(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    engine.dispatch(AddTimer(new_weekday_timer(args.label, args.weekday, args.hour, args.minute, now_ms=now_ms)))


def cmd_add_earth(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    engine.dispatch(AddTimer(new_earth_timer(args.label, args.when, now_ms=now_ms)))


def cmd_add_moon(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    engine.dispatch(AddTimer(new_moon_step_timer(args.label, args.direction, args.percent, now_ms=now_ms)))


def cmd_add_nm_window(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    timer = new_nm_timed_window_timer(
        args.label,
        now_ms=now_ms,
        tod=args.tod,
        window_start=args.start,
        window_end=args.end,
        interval=args.interval,
        warn_lead=args.warn,
    )
    engine.dispatch(AddTimer(timer))


def cmd_add_nm_lottery(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    timer = new_nm_lottery_timer(
        args.label,
        now_ms=now_ms,
        tod=args.tod,
        window_open=args.open,
        ph_respawn=args.ph,
        warn_lead=args.warn,
    )
    engine.dispatch(AddTimer(timer))


def cmd_add_presets(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    if args.offset is not None:
        engine.dispatch(SetPresetOffset(args.offset))
    offset = engine.state.preset_offset_hours
    now = vana_now(now_ms, engine.state.calibration)
    for target in reversed(preset_targets(now, offset)):
        engine.dispatch(AddTimer(new_preset_timer(target, offset, now_ms=now_ms)))


def cmd_toggle(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    engine.dispatch(ToggleTimer(_resolve_id(engine, args.id)))


def cmd_delete(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    engine.dispatch(DeleteTimer(_resolve_id(engine, args.id)))


def cmd_tod(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    base = now_ms
    if args.when:
        parsed = parse_local_datetime(args.when)
        if parsed is None:
            raise InvalidInputError(f"invalid ToD {args.when!r}")
        base = parsed
    engine.dispatch(SetTod(_resolve_id(engine, args.id), base))


def cmd_ph_kill(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    engine.dispatch(RecordPlaceholderKill(_resolve_id(engine, args.id), now_ms))


def cmd_calibrate(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    cal = engine.state.calibration
    if args.reset:
        engine.dispatch(ClearCalibration())
        return
    if args.weekday is not None:
        cal = calibration_from_snapshot(
            now_ms, args.weekday, args.hour, args.minute, cal.new_moon_start_earth_ms
        )
    if args.new_moon:
        anchor = parse_local_datetime(args.new_moon)
        if anchor is None:
            raise InvalidInputError(f"invalid new moon time {args.new_moon!r}")
        cal = with_moon_anchor(cal, anchor)
    engine.dispatch(SetCalibration(cal))
    _print_now(engine, now_ms)


def cmd_run(engine: Engine, args: argparse.Namespace, now_ms: int) -> None:
    connect_notifier(engine.bus, ConsoleNotifier(), LogKeepAwake())
    engine.on_start(lambda e: _print_now(e, wall_clock_ms()))
    engine.on_stop(lambda e: _print_now(e, wall_clock_ms()))
    try:
        if args.ticks:
            engine.run(args.ticks)
        else:
            engine.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Vana'diel clock and timers")
    ap.add_argument("--store", type=Path, default=DEFAULT_STORE, help=f"State file (default: {DEFAULT_STORE})")
    ap.add_argument("--tick-ms", type=int, default=250, help="Polling interval in ms (default: 250)")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("now", help="Show in-game time and moon").set_defaults(func=cmd_now)
    sub.add_parser("list", help="List timers").set_defaults(func=cmd_list)

    p = sub.add_parser("run", help="Run the polling loop")
    p.add_argument("--ticks", type=int, default=0, help="Stop after N ticks (default: run until Ctrl-C)")
    p.set_defaults(func=cmd_run)

    p = sub.add_parser("add-weekday", help="Alert at an in-game weekday and time")
    p.add_argument("weekday", choices=[w.value for w in WEEKDAYS])
    p.add_argument("hour", type=int)
    p.add_argument("minute", type=int, nargs="?", default=0)
    p.add_argument("--label", default="")
    p.set_defaults(func=cmd_add_weekday)

    p = sub.add_parser("add-earth", help="Daily real-world alarm")
    p.add_argument("when", help="e.g. 2024-05-01T21:00 or 05/01/2024 9:00 PM")
    p.add_argument("--label", default="")
    p.set_defaults(func=cmd_add_earth)

    p = sub.add_parser("add-moon", help="Alert at a moon direction and percent")
    p.add_argument("direction", choices=["WAXING", "WANING"])
    p.add_argument("percent", type=int)
    p.add_argument("--label", default="")
    p.set_defaults(func=cmd_add_moon)

    p = sub.add_parser("add-nm-window", help="NM with a timed pop window")
    p.add_argument("label", nargs="?", default="")
    p.add_argument("--tod", default="", help="Time of death (default: now)")
    p.add_argument("--start", default="2h")
    p.add_argument("--end", default="2.5h")
    p.add_argument("--interval", default="5m")
    p.add_argument("--warn", default="10s")
    p.set_defaults(func=cmd_add_nm_window)

    p = sub.add_parser("add-nm-lottery", help="Lottery NM with placeholder respawns")
    p.add_argument("label", nargs="?", default="")
    p.add_argument("--tod", default="", help="Time of death (default: now)")
    p.add_argument("--open", default="1:45:55")
    p.add_argument("--ph", default="5m")
    p.add_argument("--warn", default="10s")
    p.set_defaults(func=cmd_add_nm_lottery)

    p = sub.add_parser("add-presets", help="Guild, Tenshodo and digging alerts")
    p.add_argument("--offset", type=int, default=None, help="Hours before opening (0-23)")
    p.set_defaults(func=cmd_add_presets)

    for name, func, text in (
        ("toggle", cmd_toggle, "Enable or disable a timer"),
        ("delete", cmd_delete, "Delete a timer"),
        ("ph-kill", cmd_ph_kill, "Record a placeholder kill now"),
    ):
        p = sub.add_parser(name, help=text)
        p.add_argument("id", help="Timer id or unique prefix")
        p.set_defaults(func=func)

    p = sub.add_parser("tod", help="Reset an NM timer's time of death")
    p.add_argument("id")
    p.add_argument("when", nargs="?", default="", help="Time of death (default: now)")
    p.set_defaults(func=cmd_tod)

    p = sub.add_parser("calibrate", help="Calibrate against what the game shows now")
    p.add_argument("--weekday", choices=[w.value for w in WEEKDAYS])
    p.add_argument("--hour", type=int, default=0)
    p.add_argument("--minute", type=int, default=0)
    p.add_argument("--new-moon", default="", help="Real time a new moon started")
    p.add_argument("--reset", action="store_true", help="Revert to built-in calibration")
    p.set_defaults(func=cmd_calibrate)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    engine = Engine.from_store(JsonFileStore(args.store), config=ClockConfig(tick_interval_ms=args.tick_ms))
    try:
        args.func(engine, args, wall_clock_ms())
    except InvalidInputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
