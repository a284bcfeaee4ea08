"""User-facing actions on the control panel.

A front-end (CLI, web page, TUI) forwards its events to these handlers and
implements PanelView to redraw after each change.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

from sunctl.lib.color import InvalidColorError
from sunctl.lib.device import SunriseDevice
from sunctl.lib.models import (
    SAVE_ALARM_LABEL,
    SAVE_SETTINGS_LABEL,
    SAVED_LABEL,
    DeviceStatus,
    FormField,
    InteractionState,
    Panel,
)
from sunctl.lib.poller import (
    POLL_INTERVAL,
    RAMP_SETTLE_DELAY,
    STOP_SETTLE_DELAY,
    StatusPoller,
)
from sunctl.lib.reconciler import (
    SECONDS_PER_HOUR,
    mark_connecting,
    mark_unreachable,
    reconcile,
    refresh_duration_label,
    refresh_ramp_preview,
)
from sunctl.lib.timemath import (
    DEFAULT_RAMP_MS,
    InvalidFormatError,
    resolve_ramp_duration,
    split_clock,
)

SAVED_ACK_SECONDS = 1.8
LEADING_INT_PATTERN = re.compile(r"\s*[+-]?\d+")

log = logging.getLogger("sunctl")


class PanelView(Protocol):
    def render(self, panel: Panel) -> None: ...


@dataclass
class InteractionHandlers:
    device: SunriseDevice
    panel: Panel = field(default_factory=Panel)
    view: PanelView | None = None
    poll_interval: float = POLL_INTERVAL
    poller: StatusPoller = field(init=False)
    _label_timers: dict[str, asyncio.TimerHandle] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.device.on_unreachable = self.apply_unreachable
        self.poller = StatusPoller(
            fetch_status=self.device.fetch_status,
            on_status=self.apply_status,
            on_failure=self.apply_failure,
            interval=self.poll_interval,
        )
        refresh_duration_label(self.panel)
        refresh_ramp_preview(self.panel)

    def _changed(self) -> None:
        if self.view is not None:
            self.view.render(self.panel)

    # Poll results

    def apply_status(self, status: DeviceStatus) -> None:
        reconcile(status, self.panel)
        self._changed()

    def apply_failure(self) -> None:
        mark_connecting(self.panel)
        self._changed()

    def apply_unreachable(self) -> None:
        mark_unreachable(self.panel)
        self._changed()

    # Focus tracking

    def on_focus(self, name: FormField | str) -> None:
        self.panel.interaction = InteractionState.editing_field(name)

    def on_blur(self) -> None:
        self.panel.interaction = InteractionState.idle()

    # Color

    async def on_preset_selected(self, swatch_id: str) -> bool:
        color = self.panel.color
        color.select_preset(swatch_id)
        self.panel.display.custom_row_visible = False
        self.panel.display.color_hex = color.to_hex()
        refresh_ramp_preview(self.panel)
        self._changed()
        return await self.device.turn_on(*color.rgb)

    def on_custom_selected(self) -> None:
        self.panel.color.select_custom()
        self.panel.display.custom_row_visible = True
        refresh_ramp_preview(self.panel)
        self._changed()

    def on_picker_input(self, value: str) -> bool:
        try:
            self.panel.color.select_from_hex(value)
        except InvalidColorError as exc:
            log.warning("Ignoring picker input: %s", exc)
            return False
        self.panel.display.color_hex = self.panel.color.to_hex()
        refresh_ramp_preview(self.panel)
        self._changed()
        return True

    # Alarm form edits

    def on_start_time_changed(self, value: str) -> None:
        self.panel.form.start_time = value.strip()
        refresh_duration_label(self.panel)
        self._changed()

    def on_end_time_changed(self, value: str) -> None:
        self.panel.form.end_time = value.strip()
        refresh_duration_label(self.panel)
        self._changed()

    def on_enabled_changed(self, enabled: bool) -> None:
        self.panel.form.enabled = enabled
        self._changed()

    def on_utc_offset_changed(self, value: str | int) -> None:
        if isinstance(value, int):
            hours = value
        else:
            # Leading signed integer wins: "5.5" -> 5, "-3h" -> -3
            match = LEADING_INT_PATTERN.match(value)
            if match is None:
                log.warning("Ignoring UTC offset %r, using 0", value)
                hours = 0
            else:
                hours = int(match.group())
        self.panel.form.utc_offset_hours = hours
        self._changed()

    # Commands

    async def on_save_alarm(self) -> bool:
        form = self.panel.form
        if not form.start_time or not form.end_time:
            log.debug("Alarm save skipped: start or end time is empty")
            return False
        try:
            hour, minute = split_clock(form.start_time)
            duration = resolve_ramp_duration(form.start_time, form.end_time)
        except InvalidFormatError as exc:
            log.warning("Alarm save skipped: %s", exc)
            return False

        ok = await self.device.set_alarm(
            hour=hour,
            minute=minute,
            duration=duration,
            enabled=form.enabled,
        )
        if ok:
            self._acknowledge("save_alarm_label", SAVE_ALARM_LABEL)
            await self.poller.poll_once()
        return ok

    async def on_manual_on(self) -> bool:
        return await self.device.turn_on(*self.panel.color.rgb)

    async def on_ramp_start(self) -> bool:
        form = self.panel.form
        duration = DEFAULT_RAMP_MS
        if form.start_time and form.end_time:
            try:
                duration = resolve_ramp_duration(form.start_time, form.end_time)
            except InvalidFormatError as exc:
                log.warning("Ramp start skipped: %s", exc)
                return False

        ok = await self.device.start_ramp(duration)
        self.poller.refresh_later(RAMP_SETTLE_DELAY)
        return ok

    async def on_stop(self) -> bool:
        ok = await self.device.stop()
        self.poller.refresh_later(STOP_SETTLE_DELAY)
        return ok

    async def on_save_settings(self) -> bool:
        offset = self.panel.form.utc_offset_hours * SECONDS_PER_HOUR
        ok = await self.device.set_alarm(utc_offset=offset)
        if ok:
            self._acknowledge("save_settings_label", SAVE_SETTINGS_LABEL)
        return ok

    def _acknowledge(self, label: str, original: str) -> None:
        """Show "Saved" on a button for a moment, then put its label back."""
        previous = self._label_timers.pop(label, None)
        if previous is not None:
            previous.cancel()

        setattr(self.panel.display, label, SAVED_LABEL)
        self._changed()

        def revert() -> None:
            self._label_timers.pop(label, None)
            setattr(self.panel.display, label, original)
            self._changed()

        loop = asyncio.get_running_loop()
        self._label_timers[label] = loop.call_later(SAVED_ACK_SECONDS, revert)

    async def close(self) -> None:
        for handle in self._label_timers.values():
            handle.cancel()
        self._label_timers.clear()
        await self.poller.stop()
