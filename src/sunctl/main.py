"""Command line control surface for a networked sunrise alarm lamp."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sunctl.lib.color import CUSTOM_SWATCH, PRESETS
from sunctl.lib.device import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, SunriseDevice
from sunctl.lib.handlers import InteractionHandlers
from sunctl.lib.models import Config, DeviceStatus, Panel
from sunctl.lib.poller import POLL_INTERVAL
from sunctl.lib.timemath import format_duration

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
log = logging.getLogger("sunctl")


def configure_logging(debug: bool) -> None:
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, force=True)
    project_level = logging.DEBUG if debug else logging.WARNING
    log.setLevel(project_level)


def print_error(message: str) -> None:
    print(message, file=sys.stderr)


def build_args() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sunctl", description="Control a sunrise alarm lamp over HTTP."
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging for HTTP requests, responses, and reconciliation.",
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_BASE_URL,
        help=f"Base URL of the lamp. Default is {DEFAULT_BASE_URL}",
    )
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT, help="HTTP request timeout."
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=POLL_INTERVAL,
        help="Status poll interval in seconds for 'watch'.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show the lamp's current state.")

    subparsers.add_parser("watch", help="Keep polling and print every state change.")

    on = subparsers.add_parser("on", help="Turn the light on with a manual color.")
    on_color = on.add_mutually_exclusive_group()
    on_color.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        help="Preset swatch to select and send.",
    )
    on_color.add_argument("--color", help="Custom color as #RRGGBB.")

    ramp = subparsers.add_parser("ramp", help="Start a sunrise ramp now.")
    ramp.add_argument("--start", default="", help="Ramp start time HH:MM.")
    ramp.add_argument("--end", default="", help="Ramp end time HH:MM.")

    subparsers.add_parser("stop", help="Stop the ramp and turn the light off.")

    alarm = subparsers.add_parser("alarm", help="Schedule the daily sunrise alarm.")
    alarm.add_argument("--start", help="Alarm start time HH:MM. Default keeps the current one.")
    alarm.add_argument("--end", required=True, help="Time HH:MM the ramp reaches full light.")
    alarm_state = alarm.add_mutually_exclusive_group()
    alarm_state.add_argument(
        "--enable", dest="enabled", action="store_true", default=None, help="Arm the alarm."
    )
    alarm_state.add_argument(
        "--disable",
        dest="enabled",
        action="store_false",
        default=None,
        help="Disarm the alarm.",
    )

    settings = subparsers.add_parser("settings", help="Change device settings.")
    settings.add_argument(
        "--utc-offset",
        dest="utc_offset",
        type=int,
        required=True,
        help="Timezone offset in whole hours, e.g. -5.",
    )

    return parser


class ConsoleView:
    """Print one line per visible change of the panel."""

    def __init__(self) -> None:
        self._last: str | None = None

    def render(self, panel: Panel) -> None:
        line = format_panel_line(panel)
        if line != self._last:
            print(line, flush=True)
            self._last = line


def format_panel_line(panel: Panel) -> str:
    display = panel.display
    form = panel.form
    parts = [display.server_time, f"[{display.status}] {display.status_text}"]
    if display.progress_visible:
        parts.append(f"progress {display.progress_percent}%")
    parts.append(f"alarm {form.start_time or '--:--'} {'on' if form.enabled else 'off'}")
    parts.append(f"UTC{form.utc_offset_hours:+d}")
    return "  ".join(parts)


def print_status_report(panel: Panel, status: DeviceStatus | None) -> None:
    display = panel.display
    form = panel.form
    print("\n" + "=" * 50)
    print("SUNRISE LAMP STATUS")
    print("=" * 50)
    print(f"  Clock:        {display.server_time}")
    print(f"  State:        {display.status} ({display.status_text})")
    if display.progress_visible:
        print(f"  Progress:     {display.progress_percent}%")
    print(f"  Alarm:        {form.start_time or '--:--'}")
    print(f"  Armed:        {'YES' if form.enabled else 'NO'}")
    if status is not None and status.fade_duration is not None:
        print(f"  Ramp length:  {format_duration(status.fade_duration)}")
    print(f"  UTC offset:   {form.utc_offset_hours:+d}h")
    print()


async def run(args: argparse.Namespace, config: Config) -> None:
    device = SunriseDevice.from_config(config)
    view = ConsoleView() if args.command == "watch" else None
    handlers = InteractionHandlers(
        device=device,
        view=view,
        poll_interval=config.poll_interval,
    )
    try:
        await handle_command(args, handlers)
    finally:
        await handlers.close()
        await device.close()


async def handle_command(args: argparse.Namespace, handlers: InteractionHandlers) -> None:
    log.debug("Handling command=%s", args.command)
    panel = handlers.panel

    if args.command == "status":
        status = await handlers.poller.poll_once()
        if status is None:
            raise SystemExit("Lamp did not answer the status request.")
        print_status_report(panel, status)
        return

    if args.command == "watch":
        await handlers.poller.start()
        return

    if args.command == "on":
        if args.color:
            handlers.on_custom_selected()
            if not handlers.on_picker_input(args.color):
                raise SystemExit(f"Invalid color: {args.color}.")
            ok = await handlers.on_manual_on()
        elif args.preset:
            ok = await handlers.on_preset_selected(args.preset)
        else:
            ok = await handlers.on_manual_on()
        if not ok:
            raise SystemExit("Turning the light on failed.")
        swatch = panel.color.active_swatch
        label = panel.display.color_hex if swatch == CUSTOM_SWATCH else swatch
        print(f"Light on: {label} {panel.color.rgb}")
        return

    if args.command == "ramp":
        handlers.on_start_time_changed(args.start)
        handlers.on_end_time_changed(args.end)
        if not await handlers.on_ramp_start():
            raise SystemExit("Starting the ramp failed.")
        print(f"Ramp started. {panel.display.duration_label}".rstrip())
        return

    if args.command == "stop":
        if not await handlers.on_stop():
            raise SystemExit("Stopping the lamp failed.")
        return

    if args.command == "alarm":
        # Fill the form from the device first so unspecified fields keep their value.
        await handlers.poller.poll_once()
        if args.start:
            handlers.on_start_time_changed(args.start)
        handlers.on_end_time_changed(args.end)
        if args.enabled is not None:
            handlers.on_enabled_changed(args.enabled)
        if not await handlers.on_save_alarm():
            raise SystemExit("Saving the alarm failed.")
        print(f"{panel.display.save_alarm_label} {panel.display.status_text}")
        return

    if args.command == "settings":
        handlers.on_utc_offset_changed(args.utc_offset)
        if not await handlers.on_save_settings():
            raise SystemExit("Saving settings failed.")
        print(f"{panel.display.save_settings_label} UTC{args.utc_offset:+d}")
        return


def main() -> None:
    parser = build_args()
    args = parser.parse_args()
    configure_logging(args.debug)
    log.debug("CLI args: %s", args)

    config = Config(base_url=args.host, timeout=args.timeout, poll_interval=args.interval)
    log.debug("Using config=%s", config)

    try:
        asyncio.run(run(args, config))
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except SystemExit as exc:
        if isinstance(exc.code, str) and exc.code:
            print_error(exc.code)
            raise SystemExit(1) from None
        raise
    except Exception as exc:
        log.debug("Operation failed with config=%s", config, exc_info=True)
        print_error(f"Operation failed: {exc}")
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
