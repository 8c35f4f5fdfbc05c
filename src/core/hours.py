from dataclasses import dataclass

from core.config import Config

DAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

HOURS = list(range(24))

# Choices offered by the settings form
START_HOUR_OPTIONS = HOURS[:22]  # 0 .. 21
END_HOUR_OPTIONS = HOURS[2:]     # 2 .. 23


@dataclass(frozen=True)
class ScheduleSettings:
    start_hour: int = Config.DEFAULT_START_HOUR
    end_hour: int = Config.DEFAULT_END_HOUR


def is_valid_range(start_hour: int, end_hour: int) -> bool:
    return 0 <= start_hour < end_hour <= 23


def display_hours(settings: ScheduleSettings):
    """Hours shown on the calendar, both ends included."""
    return [h for h in HOURS if settings.start_hour <= h <= settings.end_hour]


def format_hour(hour: int) -> str:
    period = "PM" if hour >= 12 else "AM"
    if hour == 0:
        display = 12
    elif hour > 12:
        display = hour - 12
    else:
        display = hour
    return f"{display}:00 {period}"
