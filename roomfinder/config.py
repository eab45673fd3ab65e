"""Application configuration settings.

This module defines the ``Settings`` class using ``pydantic-settings`` to
load configuration from environment variables (and an optional ``.env``
file). It centralises the operating window, the room roster, the campus
time zone and the location of the schedule data files.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import OperatingWindow


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Configuration values loaded from environment variables.

    Environment variable names map to fields by alias. Every value has a
    default matching the campus the service was written for.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Availability window
    operating_start: str = Field(default="09:00", alias="OPERATING_START")
    operating_end: str = Field(default="19:30", alias="OPERATING_END")
    operating_days: str = Field(
        default="Mon,Tue,Wed,Thur",
        alias="OPERATING_DAYS",
        description="Comma separated days with classes. Thursday is written 'Thur'.",
    )

    # Rooms
    room_roster: str = Field(
        default="401,402,403,404,405,501,502,503,504,505",
        alias="ROOM_ROSTER",
        description="Comma separated room identifiers. Rooms not listed here are never reported.",
    )

    campus_timezone: str = Field(default="Asia/Kolkata", alias="CAMPUS_TIMEZONE")

    # Data files
    schedules_path: str = Field(default="data/schedules.json", alias="SCHEDULES_PATH")
    week_config_path: str = Field(default="data/config.json", alias="WEEK_CONFIG_PATH")
    cache_seconds: int = Field(
        default=15,
        alias="CACHE_SECONDS",
        description="How long a loaded schedule document is reused before the file is read again.",
    )

    @property
    def rooms(self) -> List[str]:
        return _split(self.room_roster)

    @property
    def days(self) -> List[str]:
        return _split(self.operating_days)

    @property
    def window(self) -> OperatingWindow:
        return OperatingWindow(start=self.operating_start, end=self.operating_end)


# Instantiate settings at module import time so other modules can import
# ``settings`` directly.
settings = Settings()
