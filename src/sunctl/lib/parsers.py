"""Payload parsing and encoding helpers for the lamp HTTP API."""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from sunctl.lib.models import DeviceStatus

log = logging.getLogger("sunctl")


def _require(data: dict[str, Any], key: str, *kinds: type) -> Any:
    if key not in data:
        raise ValueError(f"Status payload missing '{key}'")
    value = data[key]
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and bool not in kinds:
        raise ValueError(f"Status field '{key}' has wrong type: {value!r}")
    if not isinstance(value, kinds):
        raise ValueError(f"Status field '{key}' has wrong type: {value!r}")
    return value


def _reject_constant(token: str) -> float:
    raise ValueError(f"Status payload contains non-finite number {token}")


def parse_status(payload: bytes | str | dict[str, Any]) -> DeviceStatus:
    """Parse a /status response body into a DeviceStatus.

    Any missing or mistyped field fails the whole parse.
    """
    if isinstance(payload, dict):
        data = payload
    else:
        try:
            data = json.loads(payload, parse_constant=_reject_constant)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError(f"Status payload is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Status payload must be an object, got {type(data).__name__}")

    progress = float(_require(data, "progress", int, float))
    if not math.isfinite(progress):
        raise ValueError(f"Status field 'progress' is not finite: {progress!r}")

    fade_duration = data.get("fadeDuration")
    if fade_duration is not None and (
        isinstance(fade_duration, bool) or not isinstance(fade_duration, int)
    ):
        raise ValueError(f"Status field 'fadeDuration' has wrong type: {fade_duration!r}")

    return DeviceStatus(
        time=_require(data, "time", str),
        is_fading=_require(data, "isFading", bool),
        progress=progress,
        alarm_enabled=_require(data, "alarmEnabled", bool),
        alarm_hour=_require(data, "alarmHour", int),
        alarm_min=_require(data, "alarmMin", int),
        utc_offset=_require(data, "utcOffset", int),
        fade_duration=fade_duration,
    )


def build_on_params(r: int, g: int, b: int) -> dict[str, int]:
    return {"r": r, "g": g, "b": b}


def build_start_params(duration_ms: int) -> dict[str, int]:
    return {"time": duration_ms}


def build_alarm_params(
    *,
    hour: int | None = None,
    minute: int | None = None,
    duration: int | None = None,
    enabled: bool | None = None,
    utc_offset: int | None = None,
) -> dict[str, int]:
    """Encode the /setalarm fields that were given, in wire order."""
    params = {
        "hour": hour,
        "min": minute,
        "duration": duration,
        "enabled": None if enabled is None else int(enabled),
        "utcoffset": utc_offset,
    }
    encoded = {key: value for key, value in params.items() if value is not None}
    if not encoded:
        raise ValueError("At least one alarm field is required.")
    log.debug("Encoded alarm params=%s", encoded)
    return encoded
