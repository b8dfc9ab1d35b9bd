"""One ButtonEntity per custom fan command."""
from __future__ import annotations
from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from .const import (
    DOMAIN,
    SERVICE_CYCLE_SPEED,
    SERVICE_REBOOT,
    SERVICE_REFRESH,
    SERVICE_REVERSE_DIRECTION,
)
from .driver import ModernFormsDriver

BUTTONS = {
    SERVICE_REBOOT: "Reboot",
    SERVICE_REVERSE_DIRECTION: "Reverse direction",
    SERVICE_CYCLE_SPEED: "Cycle speed",
    SERVICE_REFRESH: "Refresh",
}

async def _execute(driver: ModernFormsDriver, svc: str) -> None:
    if svc == SERVICE_REBOOT:
        await driver.async_reboot()
    elif svc == SERVICE_REVERSE_DIRECTION:
        await driver.async_reverse_direction()
    elif svc == SERVICE_CYCLE_SPEED:
        await driver.async_cycle_speed()
    else:
        await driver.async_refresh()

class _ModernFormsButton(ButtonEntity):
    _attr_has_entity_name = True
    _attr_entity_category = EntityCategory.CONFIG

    def __init__(self, driver: ModernFormsDriver, svc: str):
        self.driver = driver
        self._svc   = svc
        fan_id = driver.ctx.device.network_id
        self._attr_name      = BUTTONS[svc]
        self._attr_unique_id = f"{fan_id}_{svc}"
        # share the same HA Device as the fan
        self._attr_device_info = DeviceInfo(identifiers={(DOMAIN, fan_id)})

    async def async_press(self) -> None:
        self.driver.ctx.debug("Pressed %s on %s", self._svc, self.driver.ctx.device)
        await _execute(self.driver, self._svc)

async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    driver: ModernFormsDriver = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([_ModernFormsButton(driver, svc) for svc in BUTTONS])
