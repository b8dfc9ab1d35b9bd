"""
Pure-python wire codec for the Modern Forms ``/mf`` JSON endpoint.

Builds request bodies for every message the fan understands and projects its
state reply onto a flat record.  No Home Assistant or aiohttp dependency.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Union

_LOGGER = logging.getLogger(__name__)

Dir = Literal["forward", "reverse"]

# ───────── speed labels ──────────
SPEED_LOW         = "low"
SPEED_MEDIUM_LOW  = "medium-low"
SPEED_MEDIUM      = "medium"
SPEED_MEDIUM_HIGH = "medium-high"
SPEED_HIGH        = "high"
SPEED_OFF         = "off"
SPEED_ON          = "on"

# true speeds, slowest first
ORDERED_FAN_SPEEDS = [
    SPEED_LOW,
    SPEED_MEDIUM_LOW,
    SPEED_MEDIUM,
    SPEED_MEDIUM_HIGH,
    SPEED_HIGH,
]

# what the hub may offer; off/on are switch operations
SUPPORTED_FAN_SPEEDS = [*ORDERED_FAN_SPEEDS, SPEED_OFF, SPEED_ON]

# label → code, used when commanding the fan
FAN_SPEED_CODES: dict[str, int] = {
    SPEED_LOW: 1,
    SPEED_MEDIUM_LOW: 2,
    SPEED_MEDIUM: 4,
    SPEED_MEDIUM_HIGH: 5,
    SPEED_HIGH: 6,
}
DEFAULT_SPEED_CODE = FAN_SPEED_CODES[SPEED_MEDIUM]

# code → label, used when reading state.  Lossy: 3 and 4 are both medium.
FAN_SPEED_LABELS: dict[int, str] = {
    1: SPEED_LOW,
    2: SPEED_MEDIUM_LOW,
    3: SPEED_MEDIUM,
    4: SPEED_MEDIUM,
    5: SPEED_MEDIUM_HIGH,
    6: SPEED_HIGH,
}

# current label → next raw code.  Not derived from FAN_SPEED_CODES on purpose,
# medium-low steps to 3, not 4.
CYCLE_SPEED_CODES: dict[str, int] = {
    SPEED_LOW: 2,
    SPEED_MEDIUM_LOW: 3,
    SPEED_MEDIUM: 5,
    SPEED_MEDIUM_HIGH: 6,
    SPEED_HIGH: 1,
}


def fan_speed_to_code(label: str) -> int:
    """Return the fan's integer speed for *label*, medium when unknown."""
    code = FAN_SPEED_CODES.get(label)
    if code is None:
        _LOGGER.error(
            "Unknown fan speed enum: %s, falling back to default (%d)",
            label, DEFAULT_SPEED_CODE,
        )
        return DEFAULT_SPEED_CODE
    return code


def fan_speed_from_code(code: Any) -> Optional[str]:
    """Return the label for a reported speed code, or None if it has none."""
    if isinstance(code, bool) or not isinstance(code, int):
        return None
    return FAN_SPEED_LABELS.get(code)


def next_speed_code(label: Optional[str]) -> Optional[int]:
    return CYCLE_SPEED_CODES.get(label) if label else None


# ───────── outbound messages ──────────
@dataclass(frozen=True)
class QueryState:
    """Full-state fetch."""


@dataclass(frozen=True)
class SetFanOn:
    on: bool


@dataclass(frozen=True)
class SetFanSpeed:
    speed: int


@dataclass(frozen=True)
class SetFanDirection:
    direction: Dir


@dataclass(frozen=True)
class SetLightOn:
    on: bool


@dataclass(frozen=True)
class SetLightBrightness:
    brightness: int


@dataclass(frozen=True)
class Reboot:
    """The fan restarts without answering."""


Command = Union[
    QueryState,
    SetFanOn,
    SetFanSpeed,
    SetFanDirection,
    SetLightOn,
    SetLightBrightness,
    Reboot,
]


def build_request_body(command: Command) -> dict[str, Any]:
    """Return the JSON object to POST for *command*."""
    if isinstance(command, QueryState):
        return {"queryDynamicShadowData": 1}
    if isinstance(command, SetFanOn):
        return {"fanOn": command.on}
    if isinstance(command, SetFanSpeed):
        return {"fanSpeed": command.speed}
    if isinstance(command, SetFanDirection):
        return {"fanDirection": command.direction}
    if isinstance(command, SetLightOn):
        return {"lightOn": command.on}
    if isinstance(command, SetLightBrightness):
        return {"lightBrightness": command.brightness}
    if isinstance(command, Reboot):
        return {"reboot": True}
    raise TypeError(f"Unsupported command {command!r}")


# ───────── inbound state ──────────
@dataclass(frozen=True)
class ApplianceState:
    """One state reply.  Fields the reply lacks are None."""

    fan_on: Optional[bool] = None
    fan_speed: Optional[int] = None
    fan_direction: Optional[str] = None
    light_on: Optional[bool] = None
    light_brightness: Optional[int] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ApplianceState":
        return cls(
            fan_on=data.get("fanOn"),
            fan_speed=data.get("fanSpeed"),
            fan_direction=data.get("fanDirection"),
            light_on=data.get("lightOn"),
            light_brightness=data.get("lightBrightness"),
        )
