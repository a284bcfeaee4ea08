"""Data models for sunrise lamp status, alarm form and display state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from enum import StrEnum

from sunctl.lib.color import ColorSelection

SUNRISE_GRADIENT = "linear-gradient(90deg, #000000 0%, #3d0000 30%, #ff3c0a 100%)"
SAVE_ALARM_LABEL = "Set alarm"
SAVE_SETTINGS_LABEL = "Save"
SAVED_LABEL = "Saved ✓"


@dataclass(frozen=True)
class Config:
    base_url: str
    timeout: float
    poll_interval: float


@dataclass(frozen=True)
class DeviceStatus:
    time: str
    is_fading: bool
    progress: float
    alarm_enabled: bool
    alarm_hour: int
    alarm_min: int
    utc_offset: int
    fade_duration: int | None = None


class StatusState(StrEnum):
    unreachable = enum.auto()
    connecting = enum.auto()
    fading = enum.auto()
    armed = enum.auto()
    idle = enum.auto()


class FormField(StrEnum):
    alarm_enabled = enum.auto()
    start_time = enum.auto()
    end_time = enum.auto()
    utc_offset = enum.auto()


@dataclass(frozen=True)
class InteractionState:
    """Which form control, if any, the user is currently working in."""

    editing: FormField | None = None

    @classmethod
    def idle(cls) -> InteractionState:
        return cls()

    @classmethod
    def editing_field(cls, name: FormField | str) -> InteractionState:
        return cls(editing=FormField(name))

    def is_editing(self, name: FormField) -> bool:
        return self.editing == name


@dataclass
class AlarmFormState:
    start_time: str = ""
    end_time: str = ""
    enabled: bool = False
    utc_offset_hours: int = 0


@dataclass
class DisplayState:
    server_time: str = "--:--"
    status: StatusState = StatusState.connecting
    status_text: str = "Connecting…"
    progress_visible: bool = False
    progress_percent: int = 0
    duration_label: str = ""
    ramp_preview: str = SUNRISE_GRADIENT
    color_hex: str = ""
    custom_row_visible: bool = False
    save_alarm_label: str = SAVE_ALARM_LABEL
    save_settings_label: str = SAVE_SETTINGS_LABEL


@dataclass
class Panel:
    color: ColorSelection = field(default_factory=ColorSelection.initial)
    form: AlarmFormState = field(default_factory=AlarmFormState)
    display: DisplayState = field(default_factory=DisplayState)
    interaction: InteractionState = field(default_factory=InteractionState.idle)

    def __post_init__(self) -> None:
        if not self.display.color_hex:
            self.display.color_hex = self.color.to_hex()
