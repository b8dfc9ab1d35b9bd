from __future__ import annotations
import logging
import voluptuous as vol
from homeassistant import config_entries
from homeassistant.const import CONF_IP_ADDRESS, CONF_NAME
from homeassistant.core import callback
from .const import (
    DOMAIN,
    CONF_LOG_ENABLE,
    CONF_POLL_INTERVAL,
    DEFAULT_LOG_ENABLE,
    DEFAULT_POLL_INTERVAL,
)

_LOGGER = logging.getLogger(__name__)


def _settings_schema(defaults: dict) -> dict:
    """Fields shared by the setup and options forms."""
    return {
        vol.Required(CONF_IP_ADDRESS, default=defaults.get(CONF_IP_ADDRESS, vol.UNDEFINED)): str,
        vol.Optional(
            CONF_POLL_INTERVAL,
            default=defaults.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
        ): vol.Coerce(int),
        vol.Optional(
            CONF_LOG_ENABLE,
            default=defaults.get(CONF_LOG_ENABLE, DEFAULT_LOG_ENABLE),
        ): bool,
    }


class ModernFormsConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    # ───────────────── STEP: USER ─────────────────
    async def async_step_user(self, user_input=None):
        errors = {}
        schema = vol.Schema(
            {
                **_settings_schema(user_input or {}),
                vol.Optional(CONF_NAME): str,
            }
        )

        if user_input is not None:
            ip_address = user_input[CONF_IP_ADDRESS].strip()
            if not ip_address:
                errors[CONF_IP_ADDRESS] = "ip_address_required"
                return self.async_show_form(
                    step_id="user", data_schema=schema, errors=errors
                )
            # one entry per fan address
            await self.async_set_unique_id(ip_address)
            self._abort_if_unique_id_configured()

            data = {
                CONF_IP_ADDRESS: ip_address,
                CONF_POLL_INTERVAL: user_input.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
                CONF_LOG_ENABLE: user_input.get(CONF_LOG_ENABLE, DEFAULT_LOG_ENABLE),
                CONF_NAME: user_input.get(CONF_NAME) or f"Modern Forms Fan {ip_address}",
            }
            _LOGGER.debug("Creating entry for fan at %s", ip_address)
            return self.async_create_entry(title=data[CONF_NAME], data=data)

        return self.async_show_form(step_id="user", data_schema=schema)

    # ───────────────── OPTIONS FLOW ─────────────────
    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        return ModernFormsOptionsFlow(config_entry)


class ModernFormsOptionsFlow(config_entries.OptionsFlow):
    """Change address, poll interval or debug logging without re-adding."""
    def __init__(self, entry):
        self.entry = entry

    async def async_step_init(self, user_input=None):
        if user_input is None:
            current = {**self.entry.data, **self.entry.options}
            return self.async_show_form(
                step_id="init", data_schema=vol.Schema(_settings_schema(current))
            )

        # saving fires the entry's update listener, which re-runs device setup
        return self.async_create_entry(title="", data=dict(user_input))
