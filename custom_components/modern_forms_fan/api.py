"""HTTP command dispatcher for the fan's local JSON API."""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Optional

import aiohttp

from .codec import Command, Reboot, build_request_body
from .const import DEFAULT_TIMEOUT, ENDPOINT_PATH, REBOOT_TIMEOUT
from .device import DriverConfig

_LOGGER = logging.getLogger(__name__)


def device_url(ip_address: str) -> str:
    return f"http://{ip_address}{ENDPOINT_PATH}"


def request_timeout(command: Command) -> int:
    # reboot never answers, so give up as early as possible
    return REBOOT_TIMEOUT if isinstance(command, Reboot) else DEFAULT_TIMEOUT


class ModernFormsApi:
    """POSTs one command per call to ``http://<ip>/mf``.

    Failures never propagate: a timeout is logged at debug level, anything
    else at error level, and ``None`` is returned in both cases.
    """

    def __init__(self, session: aiohttp.ClientSession):
        self._session = session

    async def async_send(self, config: DriverConfig,
                         command: Command) -> Optional[dict[str, Any]]:
        body = build_request_body(command)
        if config.log_enable:
            _LOGGER.debug("Sending request: %s", body)
        try:
            async with self._session.post(
                device_url(config.ip_address),
                json=body,
                timeout=aiohttp.ClientTimeout(total=request_timeout(command)),
            ) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError as err:
            _LOGGER.debug("Timed out sending command %s: %r", body, err)
            return None
        except (aiohttp.ClientError, OSError, ValueError) as err:
            _LOGGER.error("Error sending command %s: %s", body, err)
            return None

        if not isinstance(data, dict):
            _LOGGER.error("Unexpected response to %s: %r", body, data)
            return None
        if config.log_enable:
            _LOGGER.debug("Got response: %s", data)
        return data
