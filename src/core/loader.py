import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List

from core.crud import get_all_equipment, get_all_locations, get_schedule_entries, get_schedule_settings
from core.hours import ScheduleSettings

logger = logging.getLogger(__name__)


@dataclass
class DashboardData:
    equipment: List = field(default_factory=list)
    locations: List = field(default_factory=list)
    entries: List = field(default_factory=list)
    settings: ScheduleSettings = field(default_factory=ScheduleSettings)


FETCHERS = {
    "equipment": get_all_equipment,
    "locations": get_all_locations,
    "entries": get_schedule_entries,
    "settings": get_schedule_settings,
}


def _fetch(session_factory, fetcher):
    db = session_factory()
    try:
        return fetcher(db)
    finally:
        db.close()


def fetch_dashboard(session_factory) -> DashboardData:
    """
    Load every collection the main page needs, one session per collection,
    all at once. Waits for every fetch; the first failure is re-raised.
    """
    with ThreadPoolExecutor(max_workers=len(FETCHERS)) as pool:
        futures = {name: pool.submit(_fetch, session_factory, fetcher) for name, fetcher in FETCHERS.items()}
    results = {name: future.result() for name, future in futures.items()}
    logger.debug(
        "Loaded %d equipment, %d locations, %d entries",
        len(results["equipment"]), len(results["locations"]), len(results["entries"])
    )
    return DashboardData(**results)
