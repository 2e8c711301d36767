from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tempest.core.exceptions import StorageError
from tempest.models.observation import Observation
from tempest.schemas.weather import PrecipitationType, Weather


class ObservationRepository:
    """
    Repository for weather observation persistence.

    This repository encapsulates all database operations related to
    `Observation` rows: appending newly received observations and reading
    back the most recent ones. It is the storage sink of the ingestion loop.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with an active database session.

        Args:
            db: Asynchronous SQLAlchemy session.
        """
        self.db = db

    async def insert(self, weather: Weather) -> Observation:
        """
        Append a weather observation.

        Every call adds a new row; no deduplication is performed. On
        failure the session is rolled back so later inserts can proceed.

        Args:
            weather: Observation to store.

        Returns:
            The stored `Observation` row, with its generated id.

        Raises:
            StorageError: The row could not be written.
        """
        obs = Observation(**weather.model_dump(exclude={"precip_type"}), precip_type=int(weather.precip_type))
        try:
            self.db.add(obs)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(f"Unable to insert observation at {weather.time_epoch}: {e}") from e

        return obs

    async def list_latest(self, limit: int) -> list[Weather]:
        """
        Return up to `limit` observations, newest first.

        Raises:
            StorageError: The query failed.
        """
        stmt = select(Observation).order_by(Observation.id.desc()).limit(limit)
        try:
            rows = (await self.db.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise StorageError(f"Unable to read observations: {e}") from e

        return [self.to_weather(row) for row in rows]

    async def get_latest(self) -> Optional[Weather]:
        """
        Return the most recently stored observation, or None if none exist.
        """
        latest = await self.list_latest(1)
        return latest[0] if latest else None

    @staticmethod
    def to_weather(row: Observation) -> Weather:
        # Stored precipitation codes are read back leniently.
        return Weather(
            time_epoch=row.time_epoch,
            wind_lull=row.wind_lull,
            wind_avg=row.wind_avg,
            wind_gust=row.wind_gust,
            wind_direction=row.wind_direction,
            wind_sample_interval=row.wind_sample_interval,
            station_pressure=row.station_pressure,
            air_temp=row.air_temp,
            relative_humidity=row.relative_humidity,
            illuminance=row.illuminance,
            uv_index=row.uv_index,
            solar_radiation=row.solar_radiation,
            rain_over_prev_minute=row.rain_over_prev_minute,
            precip_type=PrecipitationType.from_raw(row.precip_type),
            lightning_avg_distance=row.lightning_avg_distance,
            lightning_strike_count=row.lightning_strike_count,
            battery_voltage=row.battery_voltage,
            report_interval=row.report_interval,
        )
