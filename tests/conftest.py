"""Shared fakes for the Modern Forms tests."""
from __future__ import annotations
import sys
from datetime import datetime
from types import SimpleNamespace

import aiohttp
import pytest

from homeassistant.const import CONF_IP_ADDRESS

from custom_components.modern_forms_fan.api import ModernFormsApi
from custom_components.modern_forms_fan.const import CONF_LOG_ENABLE, CONF_POLL_INTERVAL
from custom_components.modern_forms_fan.device import (
    DeviceHandle,
    DriverContext,
    get_or_create_child_light,
)
from custom_components.modern_forms_fan.driver import ModernFormsDriver

FAN_ID = "abc123"
FAN_NAME = "Living Room Fan"
FAN_IP = "10.0.0.5"

# what the fan answers to queryDynamicShadowData (trimmed, extra keys kept)
STATE = {
    "adaptiveLearning": False,
    "fanOn": True,
    "fanSpeed": 4,
    "fanDirection": "forward",
    "lightOn": False,
    "lightBrightness": 0,
    "rfPairModeActive": False,
}


# ---- helpers ----
class FakeResponse:
    def __init__(self, data, status=200):
        self._data = data
        self.status = status
        self.released = False

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientError(f"HTTP {self.status}")

    async def json(self, content_type="application/json"):
        return self._data

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.released = True
        return False


class FakeSession:
    """Records every POST; answers from a queue, then with ``default``."""
    def __init__(self):
        self.requests = []
        self.replies = []
        self.default = dict(STATE)

    def queue(self, *replies):
        self.replies.extend(replies)

    @property
    def bodies(self):
        return [r.json for r in self.requests]

    def post(self, url, *, json=None, timeout=None):
        self.requests.append(SimpleNamespace(url=url, json=json, timeout=timeout))
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, FakeResponse):
            return reply
        return FakeResponse(reply)


class FakeTimer:
    def __init__(self, delay, action):
        self.delay = delay
        self.action = action
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    @property
    def pending(self):
        return not (self.cancelled or self.fired)

    async def fire(self):
        self.fired = True
        await self.action(datetime.now())


def make_entry(**options):
    return SimpleNamespace(
        entry_id=FAN_ID,
        title=FAN_NAME,
        data={CONF_IP_ADDRESS: FAN_IP, CONF_POLL_INTERVAL: 30, CONF_LOG_ENABLE: False},
        options=dict(options),
    )


# ---- fixtures ----
@pytest.fixture
def timers(monkeypatch):
    """Capture async_call_later instead of touching the event loop."""
    armed = []

    def fake_call_later(hass, delay, action):
        timer = FakeTimer(delay, action)
        armed.append(timer)
        return timer.cancel

    monkeypatch.setattr(sys.modules["custom_components.modern_forms_fan.driver"],
                        "async_call_later", fake_call_later)
    return armed


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def entry():
    return make_entry()


@pytest.fixture
def ctx(entry):
    return DriverContext(SimpleNamespace(data={}), entry, DeviceHandle(FAN_ID, FAN_NAME))


@pytest.fixture
def driver(ctx, session, timers):
    return ModernFormsDriver(ctx, ModernFormsApi(session))


@pytest.fixture
def events(ctx):
    """(device id, attribute, value) for every event on the fan and its light."""
    seen = []
    for device in (ctx.device, get_or_create_child_light(ctx)):
        device.add_listener(
            lambda ev, dev=device: seen.append((dev.network_id, ev.name, ev.value))
        )
    return seen
