from sqlalchemy import BigInteger, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from tempest.models.base import Base


class Observation(Base):
    """
    Stored weather observation.

    One row per `obs_st` report received from the station, in arrival
    order. Rows are append-only: redelivered reports are stored again.
    """

    __tablename__ = "observation"

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Row identifier, increasing in insertion order",
    )

    time_epoch: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Observation time, seconds since the Unix epoch",
    )

    wind_lull: Mapped[float] = mapped_column(Float, comment="Minimum 3 second wind sample, m/s")
    wind_avg: Mapped[float] = mapped_column(Float, comment="Average wind over the report interval, m/s")
    wind_gust: Mapped[float] = mapped_column(Float, comment="Maximum 3 second wind sample, m/s")
    wind_direction: Mapped[int] = mapped_column(Integer, comment="Wind direction, degrees")
    wind_sample_interval: Mapped[int] = mapped_column(Integer, comment="Wind sample interval, seconds")
    station_pressure: Mapped[float] = mapped_column(Float, comment="Station pressure, mbar")
    air_temp: Mapped[float] = mapped_column(Float, comment="Air temperature, °C")
    relative_humidity: Mapped[float] = mapped_column(Float, comment="Relative humidity, %")
    illuminance: Mapped[int] = mapped_column(BigInteger, comment="Illuminance, lux")
    uv_index: Mapped[float] = mapped_column(Float, comment="UV index")
    solar_radiation: Mapped[int] = mapped_column(BigInteger, comment="Solar radiation, W/m^2")
    rain_over_prev_minute: Mapped[float] = mapped_column(Float, comment="Rain over the previous minute, mm")

    precip_type: Mapped[int] = mapped_column(
        Integer,
        comment="Precipitation type: 0 none, 1 rain, 2 hail, 3 rain + hail",
    )

    lightning_avg_distance: Mapped[int] = mapped_column(BigInteger, comment="Lightning strike average distance, km")
    lightning_strike_count: Mapped[int] = mapped_column(BigInteger, comment="Lightning strike count")
    battery_voltage: Mapped[float] = mapped_column(Float, comment="Battery voltage, volts")
    report_interval: Mapped[int] = mapped_column(Integer, comment="Report interval, minutes")
