from typing import Optional

from tempest.core.numeric import to_f32, to_i64, to_u16, to_u32
from tempest.schemas.packets import ObservationPacket, Packet
from tempest.schemas.weather import PrecipitationType, Weather


def normalize(packet: Packet) -> Optional[Weather]:
    """
    Project a decoded packet onto the canonical `Weather` record.

    Only full observations (`obs_st`) produce a record. Rapid wind samples,
    events and status messages are decoded for visibility but are not
    stored, so they map to `None`.
    """
    if not isinstance(packet, ObservationPacket):
        return None

    report = packet.report
    return Weather(
        time_epoch=to_i64(report.time_epoch),
        wind_lull=to_f32(report.wind_lull),
        wind_avg=to_f32(report.wind_avg),
        wind_gust=to_f32(report.wind_gust),
        wind_direction=to_u16(report.wind_direction),
        wind_sample_interval=to_u16(report.wind_sample_interval),
        station_pressure=to_f32(report.station_pressure),
        air_temp=to_f32(report.air_temp),
        relative_humidity=to_f32(report.relative_humidity),
        illuminance=to_u32(report.illuminance),
        uv_index=to_f32(report.uv_index),
        solar_radiation=to_u32(report.solar_radiation),
        rain_over_prev_minute=to_f32(report.rain_over_prev_minute),
        precip_type=PrecipitationType.from_raw(report.precip_type),
        lightning_avg_distance=to_u32(report.lightning_avg_distance),
        lightning_strike_count=to_u32(report.lightning_strike_count),
        battery_voltage=to_f32(report.battery_voltage),
        report_interval=to_u16(report.report_interval),
    )
