"""Merge authoritative device status into the control panel.

Editable form fields follow the device unless the user is working in that
field at the moment the status is applied. Everything the user cannot edit
(clock, progress, status indicator) is always replaced. Each pass is a plain
synchronous function, so nothing can interleave between its field writes.
"""

from __future__ import annotations

import logging

from sunctl.lib.models import (
    SUNRISE_GRADIENT,
    DeviceStatus,
    DisplayState,
    FormField,
    Panel,
    StatusState,
)
from sunctl.lib.timemath import (
    InvalidFormatError,
    format_clock,
    format_duration,
    resolve_ramp_duration,
    round_half_up,
)

SECONDS_PER_HOUR = 3600

log = logging.getLogger("sunctl")


def set_status(display: DisplayState, state: StatusState, text: str) -> None:
    display.status = state
    display.status_text = text


def mark_connecting(panel: Panel) -> None:
    set_status(panel.display, StatusState.connecting, "Connecting…")


def mark_unreachable(panel: Panel) -> None:
    set_status(panel.display, StatusState.unreachable, "Unreachable")


def refresh_duration_label(panel: Panel) -> None:
    """Recompute "Ramp: ..." from the form; keep the old label on bad input."""
    start, end = panel.form.start_time, panel.form.end_time
    if not start or not end:
        return
    try:
        duration = resolve_ramp_duration(start, end)
    except InvalidFormatError as exc:
        log.debug("Skipping duration label: %s", exc)
        return
    panel.display.duration_label = f"Ramp: {format_duration(duration)}"


def refresh_ramp_preview(panel: Panel) -> None:
    # The preview always shows a sunrise, never the manual color.
    panel.display.ramp_preview = SUNRISE_GRADIENT


def reconcile(status: DeviceStatus, panel: Panel) -> None:
    interaction = panel.interaction
    display = panel.display
    form = panel.form

    display.server_time = status.time

    if status.is_fading:
        percent = round_half_up(status.progress * 100)
        display.progress_visible = True
        display.progress_percent = percent
        set_status(display, StatusState.fading, f"Ramping {percent}%")
    else:
        display.progress_visible = False
        if status.alarm_enabled:
            set_status(
                display, StatusState.armed, format_clock(status.alarm_hour, status.alarm_min)
            )
        else:
            set_status(display, StatusState.idle, "No alarm")

    if not interaction.is_editing(FormField.alarm_enabled):
        form.enabled = status.alarm_enabled

    if not interaction.is_editing(FormField.start_time):
        form.start_time = format_clock(status.alarm_hour, status.alarm_min)

    if not interaction.is_editing(FormField.utc_offset):
        form.utc_offset_hours = round_half_up(status.utc_offset / SECONDS_PER_HOUR)

    refresh_duration_label(panel)
    log.debug(
        "Reconciled status=%s editing=%s form=%s",
        display.status,
        interaction.editing,
        form,
    )
