"""
Placement of schedule entries on the weekly calendar.

The calendar has one row per equipment item and one column per day of the
week. Inside a cell the visible hours are walked in order and an entry is
drawn once, at its own start hour, with a height proportional to its
duration. Nothing here is cached: the grid is rebuilt on every render.
"""
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from core.hours import DAYS, ScheduleSettings, display_hours, format_hour


@dataclass(frozen=True)
class Placement:
    entry: object
    span: int

    def height(self, hour_px: int) -> int:
        """Drawn height: one hour slot per hour of duration."""
        return self.span * hour_px


@dataclass
class GridRow:
    equipment: object
    days: List[List[Placement]] = field(default_factory=lambda: [[] for _ in DAYS])


def entry_for_cell(entries, equipment_id, day_of_week, hour):
    """First entry (in the given order) that occupies the cell, or None."""
    for entry in entries:
        if (entry.equipment_id == equipment_id
                and entry.day_of_week == day_of_week
                and entry.start_hour <= hour < entry.end_hour):
            return entry
    return None


def placement_for_cell(entries, equipment_id, day_of_week, hour) -> Optional[Placement]:
    """
    What to draw at a cell. Only the entry's first hour gets a placement;
    the other hours it covers stay empty so the entry is drawn once.
    """
    entry = entry_for_cell(entries, equipment_id, day_of_week, hour)
    if entry is None or hour != entry.start_hour:
        return None
    return Placement(entry=entry, span=entry.end_hour - entry.start_hour)


def filter_equipment(equipment, selected_id=None):
    return [eq for eq in equipment if not selected_id or eq.id == selected_id]


def build_grid(equipment, entries, settings: ScheduleSettings, selected_id=None) -> List[GridRow]:
    hours = display_hours(settings)
    rows = []
    for eq in filter_equipment(equipment, selected_id):
        row = GridRow(equipment=eq)
        for day_idx in range(len(DAYS)):
            for hour in hours:
                placement = placement_for_cell(entries, eq.id, day_idx, hour)
                if placement:
                    row.days[day_idx].append(placement)
        rows.append(row)
    return rows


def placement_label(placement: Placement) -> str:
    entry = placement.entry
    location = getattr(entry, "location", None)
    job = location.job_name if location is not None else "Reserved"
    label = f"{job} ({format_hour(entry.start_hour)} - {format_hour(entry.end_hour)})"
    if getattr(entry, "notes", None):
        label += f" - {entry.notes}"
    return label


def grid_frame(rows: List[GridRow]) -> pd.DataFrame:
    """Compact equipment x day table, one line per placement."""
    data = {day: [""] * len(rows) for day in DAYS}
    index = []
    for row_idx, row in enumerate(rows):
        eq = row.equipment
        index.append(f"{eq.name} ({eq.equipment_id})")
        for day_idx, day_name in enumerate(DAYS):
            data[day_name][row_idx] = "\n".join(placement_label(p) for p in row.days[day_idx])
    return pd.DataFrame(data, index=index, columns=DAYS)
