from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tempest.core.numeric import f32_repr

METERS_PER_SECOND_PER_MPH = 0.44704


class TempUnit(str, Enum):
    C = "°C"
    F = "°F"


class SpeedUnit(str, Enum):
    METERS_PER_SECOND = "m/s"
    MILES_PER_HOUR = "mph"


@dataclass(frozen=True)
class Temperature:
    value: float
    unit: TempUnit = TempUnit.C

    def to_fahrenheit(self) -> Temperature:
        if self.unit is TempUnit.F:
            return self
        return Temperature(self.value * (9.0 / 5.0) + 32.0, TempUnit.F)

    def to_celsius(self) -> Temperature:
        if self.unit is TempUnit.C:
            return self
        return Temperature((self.value - 32.0) * (5.0 / 9.0), TempUnit.C)

    def __str__(self) -> str:
        return f"{f32_repr(self.value)} {self.unit.value}"


@dataclass(frozen=True)
class Speed:
    value: float
    unit: SpeedUnit = SpeedUnit.METERS_PER_SECOND

    def to_meters_per_second(self) -> Speed:
        if self.unit is SpeedUnit.METERS_PER_SECOND:
            return self
        return Speed(self.value * METERS_PER_SECOND_PER_MPH, SpeedUnit.METERS_PER_SECOND)

    def to_miles_per_hour(self) -> Speed:
        if self.unit is SpeedUnit.MILES_PER_HOUR:
            return self
        return Speed(self.value / METERS_PER_SECOND_PER_MPH, SpeedUnit.MILES_PER_HOUR)

    def __str__(self) -> str:
        return f"{f32_repr(self.value)} {self.unit.value}"
