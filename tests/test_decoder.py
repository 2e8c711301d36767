import json

import pytest
from pydantic import ValidationError

from conftest import OBSERVATION_REPORT, encode, observation_message
from tempest.core.exceptions import MalformedError, UnparseableError
from tempest.schemas.packets import (
    DeviceStatusPacket,
    HubStatusPacket,
    LightningStrikeEventPacket,
    ObservationPacket,
    RainStartEventPacket,
    RapidWindPacket,
    SensorStatus,
    UnrecognizedPacket,
)
from tempest.services.decoder import decode

DEVICE_STATUS = {
    "serial_number": "AR-00004049",
    "type": "device_status",
    "hub_sn": "HB-00000001",
    "timestamp": 1510855923,
    "uptime": 2189,
    "voltage": 3.50,
    "firmware_revision": 17,
    "rssi": -17,
    "hub_rssi": -87,
    "sensor_status": 0,
    "debug": 0,
}

HUB_STATUS = {
    "serial_number": "HB-00000001",
    "type": "hub_status",
    "firmware_revision": "35",
    "uptime": 1670133,
    "rssi": -62,
    "timestamp": 1495724691,
    "reset_flags": "BOR,PIN,POR",
    "seq": 48,
    "fs": [1, 0, 15675411, 524288],
    "radio_stats": [2, 1, 0, 3, 2839],
    "mqtt_stats": [1, 0],
}


def test_decode_observation():
    packet = decode(encode(observation_message()))

    assert isinstance(packet, ObservationPacket)
    assert packet.serial_number == "ST-00000512"
    assert packet.hub_sn == "HB-00013030"
    assert packet.firmware_revision == 129
    assert packet.report.time_epoch == 1_588_186_800
    assert packet.report.wind_avg == 2.6
    assert packet.report.report_interval == 1
    assert list(packet.report) == [float(v) for v in OBSERVATION_REPORT]


def test_decode_rapid_wind(rapid_wind_datagram):
    packet = decode(rapid_wind_datagram)

    assert isinstance(packet, RapidWindPacket)
    assert packet.ob == (1493322445, 2.3, 128)


def test_decode_events():
    rain = decode(encode({"serial_number": "SK-1", "type": "evt_precip", "hub_sn": "HB-1", "evt": [1493322445]}))
    strike = decode(
        encode({"serial_number": "AR-1", "type": "evt_strike", "hub_sn": "HB-1", "evt": [1493322445, 27, 3848]})
    )

    assert isinstance(rain, RainStartEventPacket)
    assert rain.evt == (1493322445,)
    assert isinstance(strike, LightningStrikeEventPacket)
    assert strike.evt == (1493322445, 27, 3848)


def test_decode_device_status():
    packet = decode(encode({**DEVICE_STATUS, "sensor_status": 0b000001001, "debug": 1}))

    assert isinstance(packet, DeviceStatusPacket)
    assert packet.debug is True
    assert packet.rssi == -17
    assert packet.sensor_flags == SensorStatus.LIGHTNING_FAILED | SensorStatus.PRESSURE_FAILED


def test_decode_hub_status_keeps_string_firmware_revision():
    packet = decode(encode(HUB_STATUS))

    assert isinstance(packet, HubStatusPacket)
    assert packet.firmware_revision == "35"
    assert packet.radio_stats == (2, 1, 0, 3, 2839)
    assert packet.mqtt_stats == (1, 0)


@pytest.mark.parametrize(
    "message",
    [
        {"type": "light_debug", "serial_number": "ST-1"},
        {"serial_number": "ST-1", "obs": [[1, 2, 3]]},
        {"type": 5},
        {"type": None},
        {},
    ],
)
def test_unknown_or_missing_type_is_unrecognized(message):
    packet = decode(encode(message))

    assert isinstance(packet, UnrecognizedPacket)
    assert packet.type == message.get("type")


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"{",
        b'{"type": "obs_st", "obs": [[1, 2',
        b"\xff\xfe\x00garbage\x81",
        bytes(range(256)),
        b"not json at all",
    ],
)
def test_invalid_json_is_unparseable(data):
    with pytest.raises(UnparseableError) as exc_info:
        decode(data)

    assert exc_info.value.variant is None
    assert exc_info.value.detail


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_standard_number_tokens_in_an_observation_are_unparseable(token):
    report = list(OBSERVATION_REPORT)
    report[7] = float(token)
    data = encode(observation_message(report))
    assert token.encode() in data

    with pytest.raises(UnparseableError) as exc_info:
        decode(data)

    assert exc_info.value.variant is None


@pytest.mark.parametrize("token", [b"NaN", b"Infinity", b"-Infinity"])
def test_non_standard_number_tokens_in_an_unknown_message_are_unparseable(token):
    with pytest.raises(UnparseableError) as exc_info:
        decode(b'{"type": "light_debug", "x": ' + token + b"}")

    assert exc_info.value.variant is None


@pytest.mark.parametrize(
    "data",
    [
        b"\xef\xbb\xbf" + encode(observation_message()),
        json.dumps(observation_message()).encode("utf-16"),
        json.dumps(observation_message()).encode("utf-16-le"),
        b"\xef\xbb\xbf" + encode({"type": "light_debug"}),
        json.dumps({"type": "light_debug"}).encode("utf-16"),
    ],
)
def test_only_plain_utf8_is_accepted(data):
    with pytest.raises(UnparseableError) as exc_info:
        decode(data)

    assert exc_info.value.variant is None


def test_overflowing_number_in_an_observation_is_not_stored_as_infinity():
    data = encode(observation_message()).replace(b"22.37", b"1e999")

    with pytest.raises((UnparseableError, MalformedError)):
        decode(data)


@pytest.mark.parametrize("data", [b"[1, 2, 3]", b'"obs_st"', b"42", b"null"])
def test_non_object_json_is_unparseable(data):
    with pytest.raises(UnparseableError, match="expected a JSON object"):
        decode(data)


def test_debug_flag_outside_zero_or_one_is_malformed():
    with pytest.raises(MalformedError) as exc_info:
        decode(encode({**DEVICE_STATUS, "debug": 2}))

    error = exc_info.value
    assert error.variant == "device_status"
    assert "debug" in error.detail
    assert "got 2" in error.detail


def test_debug_flag_as_json_boolean_is_malformed():
    with pytest.raises(MalformedError, match="debug"):
        decode(encode({**DEVICE_STATUS, "debug": True}))


@pytest.mark.parametrize(
    "report, location",
    [
        (OBSERVATION_REPORT[:17], "obs.0"),
        (OBSERVATION_REPORT + [0], "obs.0"),
        (OBSERVATION_REPORT[:4] + ["187"] + OBSERVATION_REPORT[5:], "obs.0.4"),
        (OBSERVATION_REPORT[:13] + [None] + OBSERVATION_REPORT[14:], "obs.0.13"),
    ],
)
def test_observation_with_wrong_shape_is_malformed(report, location):
    with pytest.raises(MalformedError) as exc_info:
        decode(encode(observation_message(report)))

    assert exc_info.value.variant == "obs_st"
    assert exc_info.value.detail.startswith(location)


def test_observation_with_two_reports_is_malformed():
    message = observation_message()
    message["obs"] = [OBSERVATION_REPORT, OBSERVATION_REPORT]

    with pytest.raises(MalformedError, match="obs"):
        decode(encode(message))


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"firmware_revision": -1}, "firmware_revision"),
        ({"firmware_revision": "129"}, "firmware_revision"),
        ({"firmware_revision": 129.5}, "firmware_revision"),
        ({"hub_sn": 13030}, "hub_sn"),
    ],
)
def test_observation_header_fields_are_strict(overrides, field):
    with pytest.raises(MalformedError) as exc_info:
        decode(encode(observation_message(**overrides)))

    assert field in exc_info.value.detail


def test_missing_field_is_malformed():
    message = dict(HUB_STATUS)
    del message["seq"]

    with pytest.raises(MalformedError) as exc_info:
        decode(encode(message))

    assert exc_info.value.variant == "hub_status"
    assert "seq" in exc_info.value.detail


def test_hub_firmware_revision_must_be_a_string():
    with pytest.raises(MalformedError, match="firmware_revision"):
        decode(encode({**HUB_STATUS, "firmware_revision": 35}))


def test_rapid_wind_with_wrong_arity_is_malformed():
    message = {"serial_number": "SK-1", "type": "rapid_wind", "hub_sn": "HB-1", "ob": [1493322445, 2.3]}

    with pytest.raises(MalformedError) as exc_info:
        decode(encode(message))

    assert exc_info.value.variant == "rapid_wind"
    assert "ob" in exc_info.value.detail


def test_decode_ignores_unknown_extra_fields():
    message = observation_message(summary={"pressure_trend": "steady"})

    assert isinstance(decode(encode(message)), ObservationPacket)


def test_decoded_packet_serializes_back_to_wire_shape():
    packet = decode(encode(HUB_STATUS))

    dumped = json.loads(packet.model_dump_json())
    assert dumped["type"] == "hub_status"
    assert dumped["radio_stats"] == HUB_STATUS["radio_stats"]


def test_observation_slots_must_be_finite():
    with pytest.raises(ValidationError, match="obs.0.7"):
        ObservationPacket(
            serial_number="ST-1",
            hub_sn="HB-1",
            firmware_revision=1,
            obs=[OBSERVATION_REPORT[:7] + [float("nan")] + OBSERVATION_REPORT[8:]],
        )
