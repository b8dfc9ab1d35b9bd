from __future__ import annotations
from typing import Any, Optional
import logging
import voluptuous as vol
from homeassistant.components.fan import FanEntity, FanEntityFeature
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers import entity_platform
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.util.percentage import (
    ordered_list_item_to_percentage,
    percentage_to_ordered_list_item,
)
from .codec import ORDERED_FAN_SPEEDS, SUPPORTED_FAN_SPEEDS
from .const import (
    DOMAIN,
    ATTR_DIRECTION,
    ATTR_SPEED,
    ATTR_SUPPORTED_SPEEDS,
    ATTR_SWITCH,
    SERVICE_CYCLE_SPEED,
    SERVICE_REBOOT,
    SERVICE_REVERSE_DIRECTION,
    SERVICE_SET_SPEED,
)
from .device import AttributeEvent
from .driver import ModernFormsDriver

_LOGGER = logging.getLogger(__name__)


class ModernFormsFan(FanEntity):
    """Renders the primary device; every action goes through the driver."""
    _attr_supported_features = (
        FanEntityFeature.SET_SPEED
        | FanEntityFeature.DIRECTION
        | FanEntityFeature.TURN_ON
        | FanEntityFeature.TURN_OFF
    )
    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False
    _attr_speed_count = len(ORDERED_FAN_SPEEDS)

    def __init__(self, driver: ModernFormsDriver):
        self.driver  = driver
        self._device = driver.ctx.device
        self._attr_unique_id   = self._device.network_id
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, self._device.network_id)},
            name=self._device.display_name,
            manufacturer="Modern Forms",
            model="Fan and Light",
        )

    async def async_added_to_hass(self) -> None:
        self.async_on_remove(self._device.add_listener(self._handle_event))

    @callback
    def _handle_event(self, event: AttributeEvent) -> None:
        self.async_write_ha_state()

    # ─────── state ───────
    @property
    def is_on(self) -> Optional[bool]:
        switch = self._device.current_value(ATTR_SWITCH)
        return None if switch is None else switch == "on"

    @property
    def percentage(self) -> Optional[int]:
        if self.is_on is False:
            return 0
        speed = self._device.current_value(ATTR_SPEED)
        if speed not in ORDERED_FAN_SPEEDS:
            return None
        return ordered_list_item_to_percentage(ORDERED_FAN_SPEEDS, speed)

    @property
    def current_direction(self) -> Optional[str]:
        return self._device.current_value(ATTR_DIRECTION)

    @property
    def extra_state_attributes(self):
        return {
            ATTR_SPEED: self._device.current_value(ATTR_SPEED),
            ATTR_SUPPORTED_SPEEDS: self._device.current_value(ATTR_SUPPORTED_SPEEDS),
        }

    # ─────── FanEntity API ───────
    async def async_turn_on(self,
                            percentage: Optional[int] = None,
                            preset_mode: Optional[str] = None,
                            **kwargs: Any) -> None:
        await self.driver.async_on()
        if percentage:
            await self.async_set_percentage(percentage)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self.driver.async_off()

    async def async_set_percentage(self, percentage: int) -> None:
        if percentage == 0:
            await self.driver.async_off()
            return
        await self.driver.async_set_speed(
            percentage_to_ordered_list_item(ORDERED_FAN_SPEEDS, percentage)
        )

    async def async_set_direction(self, direction: str) -> None:
        await self.driver.async_set_direction(direction)

    async def async_update(self) -> None:
        await self.driver.async_refresh()

    # ─────── entity services ───────
    async def async_set_named_speed(self, speed: str) -> None:
        await self.driver.async_set_speed(speed)

    async def async_cycle_speed(self) -> None:
        await self.driver.async_cycle_speed()

    async def async_reverse_direction(self) -> None:
        await self.driver.async_reverse_direction()

    async def async_reboot(self) -> None:
        await self.driver.async_reboot()


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    driver: ModernFormsDriver = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([ModernFormsFan(driver)])

    platform = entity_platform.async_get_current_platform()
    platform.async_register_entity_service(
        SERVICE_SET_SPEED,
        {vol.Required(ATTR_SPEED): vol.In(SUPPORTED_FAN_SPEEDS)},
        "async_set_named_speed",
    )
    platform.async_register_entity_service(SERVICE_CYCLE_SPEED, {}, "async_cycle_speed")
    platform.async_register_entity_service(
        SERVICE_REVERSE_DIRECTION, {}, "async_reverse_direction"
    )
    platform.async_register_entity_service(SERVICE_REBOOT, {}, "async_reboot")
