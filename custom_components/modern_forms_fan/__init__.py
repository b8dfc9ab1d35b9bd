from __future__ import annotations
import logging
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import ModernFormsApi
from .const import DOMAIN, PLATFORMS
from .device import DeviceHandle, DriverContext
from .driver import ModernFormsDriver

_LOGGER = logging.getLogger(__name__)

async def async_setup(hass: HomeAssistant, _: dict) -> bool:
    return True                                    # YAML disabled

async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.debug("Setting up Modern Forms entry %s with data: %s", entry.entry_id, entry.data)
    name = entry.data.get(CONF_NAME) or entry.title
    ctx = DriverContext(hass, entry, DeviceHandle(entry.entry_id, name))
    driver = ModernFormsDriver(ctx, ModernFormsApi(async_get_clientsession(hass)))
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = driver

    # fan first: the light and buttons hang off its device
    await hass.config_entries.async_forward_entry_setups(entry, {"fan"})
    await hass.config_entries.async_forward_entry_setups(entry, {"light", "button"})

    entry.async_on_unload(entry.add_update_listener(_async_update_listener))
    # first fetch may wait out the request timeout on an unreachable fan
    entry.async_create_background_task(
        hass, driver.async_initialize(), f"{DOMAIN}_initialize_{entry.entry_id}"
    )
    return True

async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    driver: ModernFormsDriver = hass.data[DOMAIN][entry.entry_id]
    await driver.async_updated()

async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unloaded = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unloaded:
        driver: ModernFormsDriver = hass.data[DOMAIN].pop(entry.entry_id)
        await driver.async_shutdown()
    return unloaded
