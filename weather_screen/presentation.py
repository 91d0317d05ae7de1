# ABOUTME: Pure presentation helpers for the weather screen.
# ABOUTME: Icon lookup, time-of-day background gradient, and temperature/description formatting.

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Icon(str, Enum):
    SUN = "sun"
    CLOUD_SUN = "cloud-sun"
    CLOUD = "cloud"
    CLOUDS = "clouds"
    CLOUD_SHOWERS = "cloud-showers"
    CLOUD_RAIN = "cloud-rain"
    CLOUD_BOLT = "cloud-bolt"
    SNOWFLAKE = "snowflake"
    SMOG = "smog"


# Day ("d") and night ("n") variants share the numeric prefix.
_ICONS_BY_PREFIX = {
    "01": Icon.SUN,
    "02": Icon.CLOUD_SUN,
    "03": Icon.CLOUD,
    "04": Icon.CLOUDS,
    "09": Icon.CLOUD_SHOWERS,
    "10": Icon.CLOUD_RAIN,
    "11": Icon.CLOUD_BOLT,
    "13": Icon.SNOWFLAKE,
    "50": Icon.SMOG,
}


def icon_for_code(icon_code: str) -> Icon:
    """Map an OpenWeather icon code to a screen icon; unknown codes get the cloud."""
    if len(icon_code) == 3 and icon_code[2] in ("d", "n"):
        return _ICONS_BY_PREFIX.get(icon_code[:2], Icon.CLOUD)
    return Icon.CLOUD


class Color(BaseModel):
    """An RGBA colour with 0..1 channels."""

    model_config = ConfigDict(frozen=True)

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse "#RRGGBB" (with or without "#", surrounding whitespace ignored)."""
        digits = value.strip().replace("#", "")
        rgb = int(digits, 16)
        return cls(
            red=((rgb & 0xFF0000) >> 16) / 255.0,
            green=((rgb & 0x00FF00) >> 8) / 255.0,
            blue=(rgb & 0x0000FF) / 255.0,
        )

    def with_alpha(self, alpha: float) -> "Color":
        return self.model_copy(update={"alpha": alpha})

    def to_hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(*(round(c * 255) for c in (self.red, self.green, self.blue)))


class DayPeriod(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


_PERIOD_COLORS = {
    DayPeriod.MORNING: "#4FACFE",
    DayPeriod.AFTERNOON: "#007BFF",
    DayPeriod.EVENING: "#BA4CE4",
    DayPeriod.NIGHT: "#1B1F3B",
}

BOTTOM_ALPHA = 0.7


class Gradient(BaseModel):
    """Two-stop background gradient, top to bottom."""

    model_config = ConfigDict(frozen=True)

    period: DayPeriod
    top: Color
    bottom: Color


def period_for_hour(hour: int) -> DayPeriod:
    """Half-open partition of the day: [6,12) [12,18) [18,21), everything else is night."""
    if 6 <= hour < 12:
        return DayPeriod.MORNING
    if 12 <= hour < 18:
        return DayPeriod.AFTERNOON
    if 18 <= hour < 21:
        return DayPeriod.EVENING
    return DayPeriod.NIGHT


def gradient_for_hour(hour: int) -> Gradient:
    period = period_for_hour(hour)
    top = Color.from_hex(_PERIOD_COLORS[period])
    return Gradient(period=period, top=top, bottom=top.with_alpha(BOTTOM_ALPHA))


def format_temperature(celsius: float) -> str:
    """Round half away from zero, e.g. 21.4 -> "21°C", 21.5 -> "22°C"."""
    magnitude = abs(celsius)
    whole = math.floor(magnitude)
    # magnitude - whole is exact for floats.
    if magnitude - whole >= 0.5:
        whole += 1
    rounded = -whole if celsius < 0 else whole
    return f"{rounded}°C"


def format_description(text: str) -> str:
    """Upper-case the first letter only: "clear sky" -> "Clear sky"."""
    return text[:1].upper() + text[1:]
