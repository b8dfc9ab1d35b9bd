"""
Driver for one Modern Forms fan: lifecycle hooks, capability commands,
state reconciliation and the self re-arming poll.
"""
from __future__ import annotations
import json
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from homeassistant.core import CALLBACK_TYPE, HomeAssistant
from homeassistant.helpers.event import async_call_later

from .api import ModernFormsApi
from .codec import (
    SPEED_OFF,
    SPEED_ON,
    SUPPORTED_FAN_SPEEDS,
    ApplianceState,
    Command,
    Dir,
    QueryState,
    Reboot,
    SetFanDirection,
    SetFanOn,
    SetFanSpeed,
    SetLightBrightness,
    SetLightOn,
    fan_speed_from_code,
    fan_speed_to_code,
    next_speed_code,
)
from .const import (
    ATTR_DIRECTION,
    ATTR_LEVEL,
    ATTR_SPEED,
    ATTR_SUPPORTED_SPEEDS,
    ATTR_SWITCH,
)
from .device import DeviceHandle, DriverContext, get_or_create_child_light

_LOGGER = logging.getLogger(__name__)

# attribute value is the JSON text itself, not a list
SUPPORTED_FAN_SPEEDS_JSON = json.dumps(SUPPORTED_FAN_SPEEDS, separators=(",", ":"))


# ───────────────── state reconciliation ─────────────────
def _update(ctx: DriverContext, device: DeviceHandle, name: str, value: Any,
            description: str, unit: Optional[str] = None) -> None:
    if device.current_value(name) == value:
        return
    device.send_event(name, value, description_text=description, unit=unit)
    ctx.debug("%s", description)


def reconcile(ctx: DriverContext,
              new_state: Union[Mapping[str, Any], ApplianceState]) -> None:
    """Emit events for every fan/light attribute the reply changes."""
    state = (new_state if isinstance(new_state, ApplianceState)
             else ApplianceState.from_json(new_state))
    fan = ctx.device

    speed = fan_speed_from_code(state.fan_speed)
    if speed:
        _update(ctx, fan, ATTR_SPEED, speed,
                f"{fan.display_name} fan speed was set to {speed}")
    else:
        _LOGGER.error("Could not parse fan speed: %s", state.fan_speed)

    switch = "on" if state.fan_on else "off"
    _update(ctx, fan, ATTR_SWITCH, switch,
            f"{fan.display_name} fan was turned {switch}")

    if state.fan_direction is not None:
        _update(ctx, fan, ATTR_DIRECTION, state.fan_direction,
                f"{fan.display_name} fan direction was changed to {state.fan_direction}")

    light = get_or_create_child_light(ctx)
    light_switch = "on" if state.light_on else "off"
    _update(ctx, light, ATTR_SWITCH, light_switch,
            f"{light.display_name} light was turned {light_switch}")

    if state.light_brightness is not None:
        _update(ctx, light, ATTR_LEVEL, state.light_brightness,
                f"{light.display_name} light level was changed to {state.light_brightness}%",
                unit="%")


# ───────────────── poll timer ─────────────────
class PollScheduler:
    """One-shot timer, re-armed by its owner after every poll.

    Arming cancels whatever was armed before, so at most one poll is pending.
    """

    def __init__(self, hass: HomeAssistant, action: Callable[[], Awaitable[None]]):
        self._hass = hass
        self._action = action
        self._unsub: Optional[CALLBACK_TYPE] = None
        self._stopped = False

    def schedule(self, delay: float) -> None:
        self.cancel()
        if self._stopped:
            return
        self._unsub = async_call_later(self._hass, delay, self._async_fire)

    def cancel(self) -> None:
        if self._unsub is not None:
            self._unsub()
            self._unsub = None

    def stop(self) -> None:
        """Cancel and refuse further arming (entry unloaded)."""
        self._stopped = True
        self.cancel()

    async def _async_fire(self, _now: datetime) -> None:
        self._unsub = None
        await self._action()


# ───────────────── driver ─────────────────
class ModernFormsDriver:
    def __init__(self, ctx: DriverContext, api: ModernFormsApi):
        self.ctx    = ctx
        self.api    = api
        self.poller = PollScheduler(ctx.hass, self.async_run_poll)

    # ─────── lifecycle ───────
    async def async_installed(self) -> None:
        self.ctx.debug("installed()")
        await self._async_setup_device()

    async def async_updated(self) -> None:
        self.ctx.debug("updated()")
        await self._async_setup_device()

    async def async_initialize(self) -> None:
        self.ctx.debug("initialize()")
        await self._async_setup_device()

    async def async_shutdown(self) -> None:
        self.poller.stop()

    async def _async_setup_device(self) -> None:
        _update(self.ctx, self.ctx.device, ATTR_SUPPORTED_SPEEDS,
                SUPPORTED_FAN_SPEEDS_JSON,
                f"{self.ctx.device.display_name} supports {SUPPORTED_FAN_SPEEDS_JSON}")
        await self.async_fetch_device_state()
        self._schedule_next_poll()

    # ─────── polling ───────
    def _schedule_next_poll(self) -> None:
        interval = self.ctx.config.poll_interval_secs
        self.ctx.debug("Scheduling next poll for %s", interval)
        self.poller.schedule(interval)

    async def async_run_poll(self) -> None:
        self.ctx.debug("Running poll")
        try:
            await self.async_fetch_device_state()
        finally:
            self._schedule_next_poll()

    async def async_fetch_device_state(self) -> None:
        self.ctx.debug("Fetching current fan state")
        await self._async_send_and_reconcile(QueryState())

    async def _async_send(self, command: Command) -> Optional[dict[str, Any]]:
        return await self.api.async_send(self.ctx.config, command)

    async def _async_send_and_reconcile(self, command: Command) -> None:
        data = await self._async_send(command)
        if data is not None:
            reconcile(self.ctx, data)

    # ─────── Refresh / Switch ───────
    async def async_refresh(self) -> None:
        self.ctx.debug("refresh()")
        await self.async_fetch_device_state()

    async def async_on(self) -> None:
        self.ctx.debug("on()")
        await self._async_send_and_reconcile(SetFanOn(True))

    async def async_off(self) -> None:
        self.ctx.debug("off()")
        await self._async_send_and_reconcile(SetFanOn(False))

    # ─────── FanControl ───────
    async def async_set_speed(self, speed: str) -> None:
        self.ctx.debug("setSpeed(%s)", speed)
        if speed == SPEED_ON:
            await self.async_on()
            return
        if speed == SPEED_OFF:
            await self.async_off()
            return
        await self._async_send_and_reconcile(SetFanSpeed(fan_speed_to_code(speed)))

    async def async_cycle_speed(self) -> None:
        self.ctx.debug("cycleSpeed()")
        current = self.ctx.device.current_value(ATTR_SPEED)
        if not current:
            _LOGGER.error("Could not cycle speed (device has no current speed)")
            return
        code = next_speed_code(current)
        if code is None:
            _LOGGER.error("Could not cycle speed (unknown current speed %s)", current)
            return
        await self._async_send_and_reconcile(SetFanSpeed(code))

    # ─────── custom commands ───────
    async def async_reboot(self) -> None:
        self.ctx.debug("reboot()")
        if await self._async_send(Reboot()) is not None:
            self.ctx.debug("Got unexpected response (reboot should time out)")

    async def async_reverse_direction(self) -> None:
        self.ctx.debug("reverseDirection()")
        current = self.ctx.device.current_value(ATTR_DIRECTION)
        if not current:
            _LOGGER.error("Could not reverse direction (device has no current direction)")
            return
        await self._async_change_direction("reverse" if current == "forward" else "forward")

    async def async_set_direction(self, direction: Dir) -> None:
        self.ctx.debug("setDirection(%s)", direction)
        if self.ctx.device.current_value(ATTR_DIRECTION) == direction:
            return
        await self._async_change_direction(direction)

    async def _async_change_direction(self, direction: Dir) -> None:
        # the reply to a direction change lacks the rest of the state
        if await self._async_send(SetFanDirection(direction)) is not None:
            await self.async_fetch_device_state()

    # ─────── child light relay ───────
    async def async_component_refresh(self, child: DeviceHandle) -> None:
        self.ctx.debug("componentRefresh(%s)", child.display_name)
        await self.async_fetch_device_state()

    async def async_component_on(self, child: DeviceHandle) -> None:
        self.ctx.debug("componentOn(%s)", child.display_name)
        await self._async_send_and_reconcile(SetLightOn(True))

    async def async_component_off(self, child: DeviceHandle) -> None:
        self.ctx.debug("componentOff(%s)", child.display_name)
        await self._async_send_and_reconcile(SetLightOn(False))

    async def async_component_set_level(self, child: DeviceHandle, level: int,
                                        transition_time: Optional[float] = None) -> None:
        self.ctx.debug("componentSetLevel(%s, %s, %s)",
                       child.display_name, level, transition_time)
        await self._async_send_and_reconcile(SetLightBrightness(level))

    async def async_component_start_level_change(self, child: DeviceHandle,
                                                 direction: str) -> None:
        self.ctx.debug("componentStartLevelChange(%s, %s)", child.display_name, direction)

    async def async_component_stop_level_change(self, child: DeviceHandle) -> None:
        self.ctx.debug("componentStopLevelChange(%s)", child.display_name)
