"""
Message shapes broadcast by the weather station hub.

Every datagram is a JSON object whose `type` field selects one of the
models below. Field encodings are not uniform across message types: the
observation is an unnamed 18-slot array, rapid wind is a 3-tuple, the device
`debug` flag is the integer 0 or 1 and the hub firmware revision is a string.
"""

from enum import IntFlag
from typing import Annotated, Any, Literal, NamedTuple, Union

from pydantic import BaseModel, Field, FiniteFloat, field_validator

from tempest.core.numeric import I64_MAX, I64_MIN, U64_MAX


U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
I64 = Annotated[int, Field(ge=I64_MIN, le=I64_MAX)]


class ObservationReport(NamedTuple):
    """
    One `obs_st` reading, with the positional slots given names.

    The wire format identifies these values by position only; this is the
    one place that position is turned into a name.
    """

    time_epoch: float  # 0: seconds
    wind_lull: float  # 1: minimum 3 second sample, m/s
    wind_avg: float  # 2: average over report interval, m/s
    wind_gust: float  # 3: maximum 3 second sample, m/s
    wind_direction: float  # 4: degrees
    wind_sample_interval: float  # 5: seconds
    station_pressure: float  # 6: mbar
    air_temp: float  # 7: °C
    relative_humidity: float  # 8: %
    illuminance: float  # 9: lux
    uv_index: float  # 10
    solar_radiation: float  # 11: W/m^2
    rain_over_prev_minute: float  # 12: mm
    precip_type: float  # 13: 0 none, 1 rain, 2 hail, 3 rain + hail
    lightning_avg_distance: float  # 14: km
    lightning_strike_count: float  # 15
    battery_voltage: float  # 16: volts
    report_interval: float  # 17: minutes


OBSERVATION_SLOTS = len(ObservationReport._fields)


class SensorStatus(IntFlag):
    """Bit flags carried in `device_status.sensor_status`."""

    OK = 0
    LIGHTNING_FAILED = 0b000000001
    LIGHTNING_NOISE = 0b000000010
    LIGHTNING_DISTURBER = 0b000000100
    PRESSURE_FAILED = 0b000001000
    TEMPERATURE_FAILED = 0b000010000
    RH_FAILED = 0b000100000
    WIND_FAILED = 0b001000000
    PRECIP_FAILED = 0b010000000
    LIGHT_UV_FAILED = 0b100000000


class ObservationPacket(BaseModel):
    """Full station observation (`obs_st`)."""

    type: Literal["obs_st"] = "obs_st"
    serial_number: str
    hub_sn: str
    firmware_revision: U64
    obs: Annotated[
        list[Annotated[list[FiniteFloat], Field(min_length=OBSERVATION_SLOTS, max_length=OBSERVATION_SLOTS)]],
        Field(min_length=1, max_length=1),
    ]

    @property
    def report(self) -> ObservationReport:
        return ObservationReport(*self.obs[0])


class RapidWindPacket(BaseModel):
    """Rapid wind sample (`rapid_wind`): epoch, speed m/s, direction degrees."""

    type: Literal["rapid_wind"] = "rapid_wind"
    serial_number: str
    hub_sn: str
    ob: tuple[U64, FiniteFloat, U64]


class RainStartEventPacket(BaseModel):
    """Rain start event (`evt_precip`): epoch."""

    type: Literal["evt_precip"] = "evt_precip"
    serial_number: str
    hub_sn: str
    evt: tuple[U64]


class LightningStrikeEventPacket(BaseModel):
    """Lightning strike event (`evt_strike`): epoch, distance km, energy."""

    type: Literal["evt_strike"] = "evt_strike"
    serial_number: str
    hub_sn: str
    evt: tuple[U64, U64, U64]


class DeviceStatusPacket(BaseModel):
    """Sensor device status (`device_status`)."""

    type: Literal["device_status"] = "device_status"
    serial_number: str
    hub_sn: str
    timestamp: U64
    uptime: U64
    voltage: FiniteFloat
    firmware_revision: U64
    rssi: I64
    hub_rssi: I64
    sensor_status: U64
    debug: bool

    @field_validator("debug", mode="before")
    @classmethod
    def debug_from_int(cls, value: Any) -> bool:
        # Sent as 0/1; JSON booleans are not accepted either.
        if type(value) is int and value in (0, 1):
            return bool(value)
        raise ValueError(f"expected zero or one, got {value!r}")

    @property
    def sensor_flags(self) -> SensorStatus:
        return SensorStatus(self.sensor_status)


class HubStatusPacket(BaseModel):
    """Hub status (`hub_status`)."""

    type: Literal["hub_status"] = "hub_status"
    serial_number: str
    # Decimal string here, unlike the numeric revision in other messages.
    firmware_revision: str
    uptime: U64
    rssi: I64
    timestamp: U64
    reset_flags: str
    seq: U64
    radio_stats: tuple[U64, U64, U64, U64, U64]
    mqtt_stats: tuple[U64, U64]


class UnrecognizedPacket(BaseModel):
    """Any message whose `type` is missing or unknown. Nothing else is parsed."""

    type: Any = None


Packet = Union[
    ObservationPacket,
    RapidWindPacket,
    RainStartEventPacket,
    LightningStrikeEventPacket,
    DeviceStatusPacket,
    HubStatusPacket,
    UnrecognizedPacket,
]

# Discriminator value -> model for every known message type.
PACKET_TYPES: dict[str, type[BaseModel]] = {
    model.model_fields["type"].default: model
    for model in (
        ObservationPacket,
        RapidWindPacket,
        RainStartEventPacket,
        LightningStrikeEventPacket,
        DeviceStatusPacket,
        HubStatusPacket,
    )
}
