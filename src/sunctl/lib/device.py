"""HTTP control primitives for the sunrise lamp."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import httpx

from sunctl.lib.models import Config, DeviceStatus
from sunctl.lib.parsers import (
    build_alarm_params,
    build_on_params,
    build_start_params,
    parse_status,
)

DEFAULT_BASE_URL = "http://sunrise.local"
DEFAULT_TIMEOUT = 5.0

log = logging.getLogger("sunctl")


class DeviceError(RuntimeError):
    """Raised when the lamp cannot be reached or answers with garbage."""


@dataclass
class SunriseDevice:
    client: httpx.AsyncClient
    on_unreachable: Callable[[], None] | None = field(default=None, repr=False)

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        on_unreachable: Callable[[], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SunriseDevice:
        client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )
        log.debug("Using device at %s timeout=%.1fs", config.base_url, config.timeout)
        return cls(client=client, on_unreachable=on_unreachable)

    async def __aenter__(self) -> SunriseDevice:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def call(self, path: str, params: Mapping[str, int] | None = None) -> bool:
        """Send a command; True iff the lamp answered with a success status.

        Failures are never raised. They are logged and reported through
        on_unreachable.
        """
        log.debug("GET %s params=%s", path, dict(params or {}))
        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as exc:
            log.warning("Request to %s failed: %s", path, exc)
            self._report_unreachable()
            return False

        if not response.is_success:
            log.warning("Request to %s returned HTTP %d", path, response.status_code)
            self._report_unreachable()
            return False

        log.debug("GET %s -> %d", response.request.url, response.status_code)
        return True

    def _report_unreachable(self) -> None:
        if self.on_unreachable is not None:
            self.on_unreachable()

    async def turn_on(self, r: int, g: int, b: int) -> bool:
        return await self.call("/on", build_on_params(r, g, b))

    async def start_ramp(self, duration_ms: int) -> bool:
        return await self.call("/start", build_start_params(duration_ms))

    async def stop(self) -> bool:
        return await self.call("/stop")

    async def set_alarm(
        self,
        *,
        hour: int | None = None,
        minute: int | None = None,
        duration: int | None = None,
        enabled: bool | None = None,
        utc_offset: int | None = None,
    ) -> bool:
        params = build_alarm_params(
            hour=hour,
            minute=minute,
            duration=duration,
            enabled=enabled,
            utc_offset=utc_offset,
        )
        return await self.call("/setalarm", params)

    async def fetch_status(self) -> DeviceStatus:
        try:
            response = await self.client.get("/status")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DeviceError(f"Status request failed: {exc}") from exc

        try:
            status = parse_status(response.content)
        except ValueError as exc:
            raise DeviceError(f"Malformed status payload: {exc}") from exc
        log.debug("Status %s", status)
        return status
