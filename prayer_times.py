"""
Prayer times calculation from classical solar-position formulas.

Pipeline: civil date-time -> Julian Day -> solar declination and equation of time
-> transit (solar noon) -> target sun altitudes -> hour angles -> decimal hours
-> 'HH:MM AM/PM' strings in the order Fajr, Sunrise, Zuhr, Asr, Maghrib, Isha.

Every function here is pure; nothing is cached or shared between calls.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

from degree_math import acos_deg, acot_deg, clamp, cos_deg, sin_deg, tan_deg

logger = logging.getLogger(__name__)

PRAYER_NAMES = ("Fajr", "Sunrise", "Zuhr", "Asr", "Maghrib", "Isha")
# Events that need a sun-altitude threshold; Zuhr is the transit itself.
ALTITUDE_EVENTS = ("Fajr", "Sunrise", "Asr", "Maghrib", "Isha")

J2000 = 2451545.0
# Refraction plus solar disk radius at the horizon
HORIZON_ALTITUDE = -0.8333
ELEVATION_DIP_FACTOR = 0.0347
MAGHRIB_MARGIN_MINUTES = 10
# Below this, cos(lat) * cos(decl) is treated as zero
_MIN_DENOMINATOR = 1e-12

ALWAYS_DAY = "always_day"
ALWAYS_NIGHT = "always_night"

# name -> (fajr angle, isha angle)
CALCULATION_METHODS: dict[str, tuple[float, float]] = {
    "Turkey": (18.0, 17.0),
    "MWL": (18.0, 17.0),
    "ISNA": (15.0, 15.0),
    "Egypt": (19.5, 17.5),
    "Karachi": (18.0, 18.0),
    "Makkah": (18.5, 18.5),
    "Jafari": (16.0, 14.0),
}

ASR_SHADOW_FACTORS: dict[str, float] = {
    "standard": 1.0,
    "hanafi": 2.0,
}


class PrayerTimesError(Exception):
    """Base error."""


class DomainError(PrayerTimesError, ValueError):
    """Raised when the geometry is undefined for the given inputs."""


class UnknownMethodError(PrayerTimesError, ValueError):
    """Raised for a calculation method or Asr school that is not known."""


@dataclass(frozen=True)
class Location:
    """Everything one calculation needs. Validation is the caller's job."""

    latitude: float  # degrees, north positive
    longitude: float  # degrees, east positive
    elevation: float  # meters above the horizon line
    timezone: float  # hours from UTC
    fajr_angle: float  # degrees below the horizon
    isha_angle: float  # degrees below the horizon
    shadow_factor: float  # 1 = standard, 2 = hanafi
    current_datetime: datetime  # civil time at `timezone`, tzinfo ignored


class HourAngle(NamedTuple):
    degrees: float
    # None, ALWAYS_DAY or ALWAYS_NIGHT
    clamped: str | None = None


@dataclass(frozen=True)
class PrayerTimesResult:
    julian_day: float
    sun_declination: float
    equation_of_time: float
    transit_time: float
    decimal_times: tuple[float, ...]
    formatted: tuple[str, ...]
    clamped: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, str]:
        return {name.lower(): text for name, text in zip(PRAYER_NAMES, self.formatted)}


def resolve_method(name: str) -> tuple[float, float]:
    """Return (fajr_angle, isha_angle) for a method name, case-insensitively."""
    for key, angles in CALCULATION_METHODS.items():
        if key.lower() == name.lower():
            return angles
    raise UnknownMethodError(
        f"Unknown calculation method '{name}'. Available: {sorted(CALCULATION_METHODS)}"
    )


def resolve_asr_factor(school: str) -> float:
    try:
        return ASR_SHADOW_FACTORS[school.lower()]
    except KeyError:
        raise UnknownMethodError(
            f"Unknown Asr method '{school}'. Available: {sorted(ASR_SHADOW_FACTORS)}"
        ) from None


def julian_day(when: datetime, timezone: float) -> float:
    """Julian Day of a civil date-time, shifted to UTC by the timezone offset."""
    year, month = when.year, when.month
    if month <= 2:
        year -= 1
        month += 12
    A = math.floor(year / 100)
    B = 2 - A + math.floor(A / 4)
    jd = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + when.day + B - 1524.5
    day_fraction = (when.hour + when.minute / 60.0 + when.second / 3600.0) / 24.0
    return jd + day_fraction - timezone / 24.0


def sun_declination(jd: float) -> float:
    """Solar declination in degrees, three-harmonic series in the day-of-year angle."""
    T = 2 * math.pi * (jd - J2000) / 365.25
    return (
        0.37877
        + 23.264 * sin_deg(57.297 * T - 79.547)
        + 0.3812 * sin_deg(2 * 57.297 * T - 82.682)
        + 0.17132 * sin_deg(3 * 57.297 * T - 59.722)
    )


def equation_of_time(jd: float) -> float:
    """Equation of time in minutes (apparent minus mean solar time)."""
    U = (jd - J2000) / 36525
    L0 = 280.46607 + 36000.7698 * U

    et1000 = (
        -(1789 + 237 * U) * sin_deg(L0)
        - (7146 - 62 * U) * cos_deg(L0)
        + (9934 - 14 * U) * sin_deg(2 * L0)
        - (29 + 5 * U) * cos_deg(2 * L0)
        + (74 + 10 * U) * sin_deg(3 * L0)
        + (320 - 4 * U) * cos_deg(3 * L0)
        - 212 * sin_deg(4 * L0)
    )
    return et1000 / 1000


def transit_time(timezone: float, longitude: float, eot_minutes: float) -> float:
    """Solar noon (Zuhr) in the caller's civil time as decimal hours."""
    return 12 + timezone - longitude / 15 - eot_minutes / 60


def horizon_altitude(elevation: float) -> float:
    """Sun altitude at sunrise/sunset seen from `elevation` meters."""
    if elevation < 0:
        raise DomainError(f"elevation must be >= 0 meters, got {elevation}")
    return HORIZON_ALTITUDE - ELEVATION_DIP_FACTOR * math.sqrt(elevation)


def sun_altitudes(location: Location, declination: float) -> tuple[float, ...]:
    """
    Target sun altitudes (degrees) for Fajr, Sunrise, Asr, Maghrib, Isha.

    Asr is the altitude at which an object's shadow equals `shadow_factor` times its
    height plus its noon shadow.
    """
    horizon = horizon_altitude(location.elevation)
    asr = acot_deg(location.shadow_factor + tan_deg(abs(declination - location.latitude)))
    return (
        -location.fajr_angle,
        horizon,
        asr,
        horizon,
        -location.isha_angle,
    )


def hour_angle(altitude: float, latitude: float, declination: float) -> HourAngle:
    """
    Hour angle (degrees, >= 0) at which the sun reaches `altitude`.

    cos H = (sin h - sin phi sin delta) / (cos phi cos delta). A cosine outside
    [-1, 1] means the sun never reaches the altitude that day; it is clamped and the
    result is flagged instead of failing.
    """
    denominator = cos_deg(latitude) * cos_deg(declination)
    if abs(denominator) < _MIN_DENOMINATOR:
        raise DomainError(
            f"hour angle undefined at latitude={latitude}, declination={declination}"
        )
    cos_ha = (sin_deg(altitude) - sin_deg(latitude) * sin_deg(declination)) / denominator

    clamped = None
    if cos_ha > 1:
        clamped = ALWAYS_NIGHT
    elif cos_ha < -1:
        clamped = ALWAYS_DAY
    return HourAngle(acos_deg(clamp(cos_ha)), clamped)


def hour_angles(
    altitudes: tuple[float, ...], latitude: float, declination: float
) -> tuple[HourAngle, ...]:
    return tuple(hour_angle(alt, latitude, declination) for alt in altitudes)


def compose_prayer_times(transit: float, angles: tuple[float, ...]) -> tuple[float, ...]:
    """Six decimal-hour times from the transit and the five hour angles (degrees)."""
    fajr, sunrise, asr, maghrib, isha = (float(a) for a in angles)
    return (
        transit - fajr / 15,
        transit - sunrise / 15,
        transit,
        transit + asr / 15,
        transit + maghrib / 15 + MAGHRIB_MARGIN_MINUTES / 60.0,
        transit + isha / 15,
    )


def _normalize_hour_24(hours: float) -> float:
    """Normalize hour to [0, 24)."""
    h = hours % 24.0
    return h if h >= 0 else h + 24.0


def format_clock(hours: float) -> str:
    """
    Decimal hours -> 'HH:MM AM' / 'HH:MM PM'.

    Hours outside [0, 24) are wrapped first. Minutes are rounded up (ceiling) and a
    result of 60 carries into the hour.
    """
    h = _normalize_hour_24(hours)
    hour = int(math.floor(h))
    # strip float noise so exact minutes are not pushed up by the ceiling
    minute = int(math.ceil(round((h - hour) * 60, 6)))
    if minute >= 60:
        minute = 0
        hour += 1
    if hour >= 24:
        hour = 0
    period = "PM" if hour >= 12 else "AM"
    display = hour % 12 or 12
    return f"{display:02d}:{minute:02d} {period}"


def parse_clock(text: str) -> tuple[int, int]:
    """'HH:MM AM/PM' -> (hour on a 24h clock, minute)."""
    clock, _, period = text.strip().partition(" ")
    hh, _, mm = clock.partition(":")
    hour, minute = int(hh), int(mm)
    if period not in ("AM", "PM") or not 1 <= hour <= 12 or not 0 <= minute < 60:
        raise ValueError(f"not a 12-hour clock time: {text!r}")
    return hour % 12 + (12 if period == "PM" else 0), minute


def compute_prayer_times(location: Location) -> PrayerTimesResult:
    jd = julian_day(location.current_datetime, location.timezone)
    declination = sun_declination(jd)
    eot = equation_of_time(jd)
    transit = transit_time(location.timezone, location.longitude, eot)

    altitudes = sun_altitudes(location, declination)
    angles = hour_angles(altitudes, location.latitude, declination)
    clamped = tuple(
        name for name, angle in zip(ALTITUDE_EVENTS, angles) if angle.clamped is not None
    )
    if clamped:
        logger.debug(
            "Clamped hour angles at lat=%s decl=%.3f: %s",
            location.latitude,
            declination,
            ", ".join(f"{n}={a.clamped}" for n, a in zip(ALTITUDE_EVENTS, angles) if a.clamped),
        )

    decimal_times = compose_prayer_times(transit, tuple(a.degrees for a in angles))
    return PrayerTimesResult(
        julian_day=jd,
        sun_declination=declination,
        equation_of_time=eot,
        transit_time=transit,
        decimal_times=decimal_times,
        formatted=tuple(format_clock(t) for t in decimal_times),
        clamped=clamped,
    )


def get_prayer_times(location: Location) -> list[str]:
    """
    Prayer times for `location` as ['HH:MM AM', ...] in the order
    Fajr, Sunrise, Zuhr, Asr, Maghrib, Isha.
    """
    return list(compute_prayer_times(location).formatted)
