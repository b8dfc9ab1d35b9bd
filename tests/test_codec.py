import logging

import pytest

from custom_components.modern_forms_fan.codec import (
    CYCLE_SPEED_CODES,
    ORDERED_FAN_SPEEDS,
    SUPPORTED_FAN_SPEEDS,
    ApplianceState,
    QueryState,
    Reboot,
    SetFanDirection,
    SetFanOn,
    SetFanSpeed,
    SetLightBrightness,
    SetLightOn,
    build_request_body,
    fan_speed_from_code,
    fan_speed_to_code,
    next_speed_code,
)


@pytest.mark.parametrize("label", ORDERED_FAN_SPEEDS)
def test_canonical_labels_survive_encode_decode(label):
    assert fan_speed_from_code(fan_speed_to_code(label)) == label


def test_codes_three_and_four_are_both_medium():
    assert fan_speed_from_code(3) == "medium"
    assert fan_speed_from_code(4) == "medium"
    # lossy: 3 comes back as 4
    assert fan_speed_to_code(fan_speed_from_code(3)) == 4


@pytest.mark.parametrize("code", [0, 7, -1, None, "4", 4.5, True])
def test_unmappable_codes_decode_to_none(code):
    assert fan_speed_from_code(code) is None


def test_unknown_label_falls_back_to_medium(caplog):
    with caplog.at_level(logging.ERROR):
        assert fan_speed_to_code("turbo") == 4
    assert "Unknown fan speed enum: turbo" in caplog.text


def test_pseudo_speeds_are_offered_but_not_encodable():
    assert SUPPORTED_FAN_SPEEDS == [
        "low", "medium-low", "medium", "medium-high", "high", "off", "on",
    ]
    assert fan_speed_to_code("on") == 4


def test_cycle_table_targets_raw_codes():
    assert CYCLE_SPEED_CODES == {
        "low": 2,
        "medium-low": 3,
        "medium": 5,
        "medium-high": 6,
        "high": 1,
    }
    assert next_speed_code("medium-low") == 3
    assert next_speed_code(None) is None
    assert next_speed_code("off") is None


@pytest.mark.parametrize(
    "command, body",
    [
        (QueryState(), {"queryDynamicShadowData": 1}),
        (SetFanOn(True), {"fanOn": True}),
        (SetFanOn(False), {"fanOn": False}),
        (SetFanSpeed(5), {"fanSpeed": 5}),
        (SetFanDirection("reverse"), {"fanDirection": "reverse"}),
        (SetLightOn(True), {"lightOn": True}),
        (SetLightBrightness(40), {"lightBrightness": 40}),
        (Reboot(), {"reboot": True}),
    ],
)
def test_request_bodies(command, body):
    assert build_request_body(command) == body


def test_request_body_rejects_foreign_objects():
    with pytest.raises(TypeError):
        build_request_body({"fanOn": True})


def test_state_ignores_unknown_fields():
    state = ApplianceState.from_json(
        {"fanOn": True, "fanSpeed": 2, "fanDirection": "reverse",
         "lightOn": True, "lightBrightness": 70, "clientId": "MF_000000"}
    )
    assert state == ApplianceState(True, 2, "reverse", True, 70)


def test_state_missing_fields_are_none():
    state = ApplianceState.from_json({"fanDirection": "forward"})
    assert state.fan_direction == "forward"
    assert state.fan_on is None
    assert state.fan_speed is None
    assert state.light_brightness is None
