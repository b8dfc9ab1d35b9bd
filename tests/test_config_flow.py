from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.const import CONF_IP_ADDRESS, CONF_NAME
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.modern_forms_fan.const import (
    CONF_LOG_ENABLE,
    CONF_POLL_INTERVAL,
    DOMAIN,
)


async def test_user_step_creates_entry(hass, enable_custom_integrations):
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] == FlowResultType.FORM

    with patch(
        "custom_components.modern_forms_fan.async_setup_entry", return_value=True
    ):
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], {CONF_IP_ADDRESS: "10.0.0.5", CONF_POLL_INTERVAL: 15}
        )
        await hass.async_block_till_done()

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert result["title"] == "Modern Forms Fan 10.0.0.5"
    assert result["data"] == {
        CONF_IP_ADDRESS: "10.0.0.5",
        CONF_POLL_INTERVAL: 15,
        CONF_LOG_ENABLE: False,
        CONF_NAME: "Modern Forms Fan 10.0.0.5",
    }


async def test_blank_address_is_rejected(hass, enable_custom_integrations):
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    result = await hass.config_entries.flow.async_configure(
        result["flow_id"], {CONF_IP_ADDRESS: "   "}
    )
    assert result["type"] == FlowResultType.FORM
    assert result["errors"] == {CONF_IP_ADDRESS: "ip_address_required"}


async def test_same_address_aborts(hass, enable_custom_integrations):
    MockConfigEntry(
        domain=DOMAIN, unique_id="10.0.0.5", data={CONF_IP_ADDRESS: "10.0.0.5"}
    ).add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    result = await hass.config_entries.flow.async_configure(
        result["flow_id"], {CONF_IP_ADDRESS: "10.0.0.5"}
    )
    assert result["type"] == FlowResultType.ABORT
    assert result["reason"] == "already_configured"


async def test_options_flow_stores_settings(hass, enable_custom_integrations):
    entry = MockConfigEntry(
        domain=DOMAIN, unique_id="10.0.0.5", data={CONF_IP_ADDRESS: "10.0.0.5"}
    )
    entry.add_to_hass(hass)

    result = await hass.config_entries.options.async_init(entry.entry_id)
    assert result["type"] == FlowResultType.FORM

    result = await hass.config_entries.options.async_configure(
        result["flow_id"],
        {CONF_IP_ADDRESS: "10.0.0.6", CONF_POLL_INTERVAL: 60, CONF_LOG_ENABLE: True},
    )
    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert entry.options == {
        CONF_IP_ADDRESS: "10.0.0.6",
        CONF_POLL_INTERVAL: 60,
        CONF_LOG_ENABLE: True,
    }
