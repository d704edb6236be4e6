import logging
import os
from datetime import date as Date, datetime, time as Time, timedelta

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from prayer_times import (
    PRAYER_NAMES,
    DomainError,
    Location,
    UnknownMethodError,
    compute_prayer_times,
    resolve_asr_factor,
    resolve_method,
)

DEFAULT_METHOD = os.getenv("ADHAN_DEFAULT_METHOD", "Turkey")
MAX_DAYS = int(os.getenv("ADHAN_MAX_DAYS", "31"))
LOG_LEVEL = os.getenv("ADHAN_LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Adhan Times API",
    description="API service for calculating Islamic prayer times from solar position",
    version="1.0.0"
)


class LocationIn(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    elevation: float = Field(default=0.0, ge=0)
    timezone: float = Field(ge=-12, le=14)
    fajr_angle: float = Field(default=18.0, ge=0, lt=90)
    isha_angle: float = Field(default=17.0, ge=0, lt=90)
    shadow_factor: float = Field(default=1.0, gt=0)
    current_datetime: datetime

    def to_location(self) -> Location:
        return Location(
            latitude=self.latitude,
            longitude=self.longitude,
            elevation=self.elevation,
            timezone=self.timezone,
            fajr_angle=self.fajr_angle,
            isha_angle=self.isha_angle,
            shadow_factor=self.shadow_factor,
            current_datetime=self.current_datetime.replace(tzinfo=None),
        )


class AdhanOut(BaseModel):
    times: list[str]
    clamped: list[str] = []


def _calculate(location: Location):
    try:
        return compute_prayer_times(location)
    except DomainError as exc:
        logger.warning("Rejected location %s: %s", location, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/")
def root():
    return {
        "service": "Adhan Times API",
        "status": "online",
        "order": list(PRAYER_NAMES),
        "endpoints": {
            "/api/adhan": "Get prayer times for GPS coordinates (GET query or POST body)"
        }
    }


@app.post("/api/adhan", response_model=AdhanOut)
def post_adhan(body: LocationIn):
    result = _calculate(body.to_location())
    return AdhanOut(times=list(result.formatted), clamped=list(result.clamped))


@app.get("/api/adhan")
def get_adhan(
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
    date: Date = Query(description="YYYY-MM-DD"),
    time: Time = Query(default=Time(12, 0), description="HH:MM[:SS] local time"),
    timezone: float = Query(default=0.0, ge=-12, le=14),  # Hours, e.g. 3.0
    elevation: float = Query(default=0.0, ge=0),
    days: int = Query(default=1, ge=1),
    calculationMethod: str = DEFAULT_METHOD,
    asrMethod: str = "standard",
    fajrAngle: float | None = Query(default=None, ge=0, lt=90),
    ishaAngle: float | None = Query(default=None, ge=0, lt=90),
    shadowFactor: float | None = Query(default=None, gt=0),
):
    if days > MAX_DAYS:
        raise HTTPException(status_code=422, detail=f"days must be <= {MAX_DAYS}")
    try:
        fajr_angle, isha_angle = resolve_method(calculationMethod)
        shadow_factor = resolve_asr_factor(asrMethod)
    except UnknownMethodError as exc:
        logger.warning("Unknown method: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    # Explicit angles override the named method
    if fajrAngle is not None:
        fajr_angle = fajrAngle
    if ishaAngle is not None:
        isha_angle = ishaAngle
    if shadowFactor is not None:
        shadow_factor = shadowFactor

    start = datetime.combine(date, time)
    response_times = {}
    response_clamped = {}

    for i in range(days):
        current = start + timedelta(days=i)
        date_key = current.strftime("%Y-%m-%d")
        result = _calculate(
            Location(
                latitude=lat,
                longitude=lng,
                elevation=elevation,
                timezone=timezone,
                fajr_angle=fajr_angle,
                isha_angle=isha_angle,
                shadow_factor=shadow_factor,
                current_datetime=current,
            )
        )
        # [0]: Fajr, [1]: Sunrise, [2]: Zuhr, [3]: Asr, [4]: Maghrib, [5]: Isha
        response_times[date_key] = list(result.formatted)
        if result.clamped:
            response_clamped[date_key] = list(result.clamped)

    return {"times": response_times, "clamped": response_clamped}
