from __future__ import annotations
from typing import Any, Optional
from homeassistant.components.light import (
    ATTR_BRIGHTNESS,
    ATTR_TRANSITION,
    ColorMode,
    LightEntity,
)
from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.util.color import brightness_to_value, value_to_brightness
from .const import DOMAIN, ATTR_LEVEL, ATTR_SWITCH
from .device import AttributeEvent, get_or_create_child_light
from .driver import ModernFormsDriver

LEVEL_RANGE: tuple[int, int] = (1, 100)


class ModernFormsLight(LightEntity):
    """The fan's light, as its own dimmable child device."""
    _attr_color_mode = ColorMode.BRIGHTNESS
    _attr_supported_color_modes = {ColorMode.BRIGHTNESS}
    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False

    def __init__(self, driver: ModernFormsDriver):
        self.driver = driver
        self.child  = get_or_create_child_light(driver.ctx)
        self._attr_unique_id = self.child.network_id
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, self.child.network_id)},
            name=self.child.display_name,
            manufacturer="Modern Forms",
            model=self.child.type_name,
            via_device=(DOMAIN, self.child.parent_id),
        )

    async def async_added_to_hass(self) -> None:
        self.async_on_remove(self.child.add_listener(self._handle_event))

    @callback
    def _handle_event(self, event: AttributeEvent) -> None:
        self.async_write_ha_state()

    @property
    def is_on(self) -> Optional[bool]:
        switch = self.child.current_value(ATTR_SWITCH)
        return None if switch is None else switch == "on"

    @property
    def brightness(self) -> Optional[int]:
        level = self.child.current_value(ATTR_LEVEL)
        if level is None:
            return None
        return value_to_brightness(LEVEL_RANGE, level)

    async def async_turn_on(self, **kwargs: Any) -> None:
        if ATTR_BRIGHTNESS in kwargs:
            # rounded so a rendered brightness maps back to the same level
            level = max(1, round(brightness_to_value(LEVEL_RANGE, kwargs[ATTR_BRIGHTNESS])))
            await self.driver.async_component_set_level(
                self.child, level, kwargs.get(ATTR_TRANSITION)
            )
            return
        await self.driver.async_component_on(self.child)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self.driver.async_component_off(self.child)

    async def async_update(self) -> None:
        await self.driver.async_component_refresh(self.child)


async def async_setup_entry(hass, entry, async_add_entities):
    driver: ModernFormsDriver = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([ModernFormsLight(driver)])
