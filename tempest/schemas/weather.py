from enum import IntEnum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer

from tempest.core.numeric import I64_MAX, I64_MIN, U16_MAX, U32_MAX, f32_repr, to_f32, to_u64


class PrecipitationType(IntEnum):
    """
    Precipitation type reported in slot 13 of an observation.

    Validating this enum from a structured field is strict: only 0..3 are
    accepted. Raw observation slots go through `from_raw` instead, which
    never fails.
    """

    NONE = 0
    RAIN = 1
    HAIL = 2
    RAIN_AND_HAIL = 3

    @classmethod
    def from_raw(cls, value: float) -> "PrecipitationType":
        """
        Map a raw numeric slot to a precipitation type.

        The value is truncated to an unsigned integer first; anything outside
        the known codes is reported as no precipitation so that newer sensor
        firmware does not break ingestion.
        """
        try:
            return cls(to_u64(value))
        except ValueError:
            return cls.NONE


# Single precision value; serialized as the shortest decimal that reads back
# to the same single precision value.
F32 = Annotated[
    float,
    AfterValidator(to_f32),
    PlainSerializer(f32_repr, return_type=float, when_used="json"),
]
I64 = Annotated[int, Field(ge=I64_MIN, le=I64_MAX)]
U16 = Annotated[int, Field(ge=0, le=U16_MAX)]
U32 = Annotated[int, Field(ge=0, le=U32_MAX)]


class Weather(BaseModel):
    """
    Canonical weather observation.

    Built once from an `obs_st` packet and handed to storage unchanged.
    """

    model_config = ConfigDict(frozen=True)

    time_epoch: I64 = Field(..., description="Observation time, seconds since the Unix epoch")
    wind_lull: F32 = Field(..., description="Minimum 3 second wind sample, m/s")
    wind_avg: F32 = Field(..., description="Average wind over the report interval, m/s")
    wind_gust: F32 = Field(..., description="Maximum 3 second wind sample, m/s")
    wind_direction: U16 = Field(..., description="Wind direction, degrees")
    wind_sample_interval: U16 = Field(..., description="Wind sample interval, seconds")
    station_pressure: F32 = Field(..., description="Station pressure, mbar")
    air_temp: F32 = Field(..., description="Air temperature, °C")
    relative_humidity: F32 = Field(..., description="Relative humidity, %")
    illuminance: U32 = Field(..., description="Illuminance, lux")
    uv_index: F32 = Field(..., description="UV index")
    solar_radiation: U32 = Field(..., description="Solar radiation, W/m^2")
    rain_over_prev_minute: F32 = Field(..., description="Rain over the previous minute, mm")
    precip_type: PrecipitationType = Field(..., description="0 none, 1 rain, 2 hail, 3 rain + hail")
    lightning_avg_distance: U32 = Field(..., description="Lightning strike average distance, km")
    lightning_strike_count: U32 = Field(..., description="Lightning strike count")
    battery_voltage: F32 = Field(..., description="Battery voltage, volts")
    report_interval: U16 = Field(..., description="Report interval, minutes")
