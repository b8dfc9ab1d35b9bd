"""Hub-side device model: attribute stores, driver context and the child light."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_IP_ADDRESS
from homeassistant.core import HomeAssistant

from .const import (
    CONF_LOG_ENABLE,
    CONF_POLL_INTERVAL,
    DEFAULT_LOG_ENABLE,
    DEFAULT_POLL_INTERVAL,
    LIGHT_DEVICE_TYPE,
    LIGHT_ID_SUFFIX,
    LIGHT_NAME_SUFFIX,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeEvent:
    name: str
    value: Any
    description_text: Optional[str] = None
    unit: Optional[str] = None


class DeviceHandle:
    """Attribute store for one hub device.  Entities render from it."""

    def __init__(self,
                 network_id: str,
                 display_name: str,
                 *,
                 type_name: Optional[str] = None,
                 is_component: bool = False,
                 parent_id: Optional[str] = None):
        self.network_id   = network_id
        self.display_name = display_name
        self.type_name    = type_name
        self.is_component = is_component
        self.parent_id    = parent_id
        self._attributes: dict[str, Any] = {}
        self._listeners: list[Callable[[AttributeEvent], None]] = []

    def current_value(self, name: str) -> Any:
        return self._attributes.get(name)

    def send_event(self, name: str, value: Any, *,
                   description_text: Optional[str] = None,
                   unit: Optional[str] = None) -> AttributeEvent:
        """Store *value* and notify listeners.  Callers skip unchanged values."""
        event = AttributeEvent(name, value, description_text, unit)
        self._attributes[name] = value
        for listener in list(self._listeners):
            listener(event)
        return event

    def add_listener(self, listener: Callable[[AttributeEvent], None]) -> Callable[[], None]:
        """Subscribe to attribute events; returns the unsubscribe callable."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return _remove

    def __repr__(self) -> str:
        return f"<DeviceHandle {self.network_id} {self.display_name!r}>"


@dataclass(frozen=True)
class DriverConfig:
    ip_address: str
    poll_interval_secs: int = DEFAULT_POLL_INTERVAL
    log_enable: bool = DEFAULT_LOG_ENABLE

    @classmethod
    def from_entry(cls, entry: ConfigEntry) -> "DriverConfig":
        """Entry data overlaid with options.  No range checks."""
        merged = {**entry.data, **entry.options}
        return cls(
            ip_address=merged.get(CONF_IP_ADDRESS, ""),
            poll_interval_secs=int(merged.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL)),
            log_enable=bool(merged.get(CONF_LOG_ENABLE, DEFAULT_LOG_ENABLE)),
        )


@dataclass
class DriverContext:
    """Everything one driver instance operates on."""

    hass: HomeAssistant
    entry: ConfigEntry
    device: DeviceHandle
    children: dict[str, DeviceHandle] = field(default_factory=dict)

    @property
    def config(self) -> DriverConfig:
        # re-read every time so option changes apply to the next operation
        return DriverConfig.from_entry(self.entry)

    def debug(self, msg: str, *args: Any) -> None:
        if self.config.log_enable:
            _LOGGER.debug(msg, *args)


def get_or_create_child_light(ctx: DriverContext) -> DeviceHandle:
    """Return the light child of ``ctx.device``, creating it on first use."""
    child_id = f"{ctx.device.network_id}{LIGHT_ID_SUFFIX}"
    child = ctx.children.get(child_id)
    if child is not None:
        return child
    ctx.debug("Creating child dimmer device %s", child_id)
    child = DeviceHandle(
        child_id,
        f"{ctx.device.display_name}{LIGHT_NAME_SUFFIX}",
        type_name=LIGHT_DEVICE_TYPE,
        is_component=True,
        parent_id=ctx.device.network_id,
    )
    ctx.children[child_id] = child
    return child
