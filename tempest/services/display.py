"""Human-readable rendering of a stored observation."""

from datetime import datetime, timedelta, tzinfo
from typing import Optional

from tempest.core.numeric import f32_repr
from tempest.schemas.weather import Weather
from tempest.services.units import Speed, Temperature


def counted(count: int, singular: str) -> str:
    """`counted(1, "hour")` -> "1 hour", `counted(2, "hour")` -> "2 hours"."""
    return f"{count} {singular}" if count == 1 else f"{count} {singular}s"


def format_duration(duration: timedelta) -> str:
    """
    Spell out a duration as hours, minutes and seconds.

    Hours are shown only when non-zero, minutes when hours or minutes are
    non-zero, seconds always.
    """
    total = max(0, int(duration.total_seconds()))
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)

    pieces = []
    if hours > 0:
        pieces.append(counted(hours, "hour"))
    if hours > 0 or minutes > 0:
        pieces.append(counted(minutes, "minute"))
    pieces.append(counted(seconds, "second"))
    return ", ".join(pieces)


def format_timestamp(moment: datetime) -> str:
    """E.g. "April 29, 2020 at 7:00 PM"."""
    hour = moment.hour % 12 or 12
    return f"{moment:%B} {moment.day}, {moment.year} at {hour}:{moment:%M} {moment:%p}"


def format_observed_at(
    time_epoch: int,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """
    Header line of a report, e.g. "April 29, 2020 at 7:00 PM (5 seconds ago)".

    Epochs outside the range `datetime` can represent (saturated slot values)
    are shown as raw seconds.
    """
    try:
        observed_at = datetime.fromtimestamp(time_epoch, tz=tz).astimezone(tz)
    except (OverflowError, ValueError, OSError):
        return f"{time_epoch} seconds since the Unix epoch"

    now = now or datetime.now(tz=observed_at.tzinfo)
    return f"{format_timestamp(observed_at)} ({format_duration(now - observed_at)} ago)"


def format_weather(
    weather: Weather,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """
    Render an observation as a multi-line report.

    Temperatures are shown in °F and wind speeds in mph.

    Args:
        weather: Observation to render.
        now: Reference time for the "ago" part, defaults to the current time.
        tz: Time zone for display, defaults to the local zone.
    """
    lines = [
        format_observed_at(weather.time_epoch, now, tz),
        f"Air Temperature: {Temperature(weather.air_temp).to_fahrenheit()}",
        f"Wind Lull: {Speed(weather.wind_lull).to_miles_per_hour()}",
        f"Wind Avg: {Speed(weather.wind_avg).to_miles_per_hour()}",
        f"Wind Gust: {Speed(weather.wind_gust).to_miles_per_hour()}",
        f"Wind Direction: {weather.wind_direction}°",
        f"Wind Sample Interval: {weather.wind_sample_interval} seconds",
        f"Station Pressure: {f32_repr(weather.station_pressure)} mbar",
        f"Relative Humidity: {f32_repr(weather.relative_humidity)}%",
        f"Illuminance: {weather.illuminance} Lux",
        f"UV Index: {f32_repr(weather.uv_index)}",
        f"Solar Radiation: {weather.solar_radiation} W/m^2",
        f"Rain over Previous Minute: {f32_repr(weather.rain_over_prev_minute)} mm",
        f"Precipitation Type: {weather.precip_type.name.replace('_', ' ').title()}",
        f"Lightning Average Distance: {weather.lightning_avg_distance} km",
        f"Lightning Strike Count: {weather.lightning_strike_count}",
        f"Battery Voltage: {f32_repr(weather.battery_voltage)} Volts",
        f"Report Interval: {weather.report_interval} Minutes",
    ]
    return "\n".join(lines)
