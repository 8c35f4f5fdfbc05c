import streamlit as st

from core.actions import add_schedule_entry, change_settings, remove_schedule_entry
from core.forms import missing_fields, run_mutation, ENTRY_FIELDS
from core.grid import build_grid
from core.hours import DAYS, END_HOUR_OPTIONS, START_HOUR_OPTIONS, display_hours, format_hour
from ui.components import (
    ask_confirmation, confirmed_value, finish_mutation, schedule_grid, schedule_table
)

ENTRY_FORM_KEYS = ["entry_equipment", "entry_location", "entry_day", "entry_start", "entry_end", "entry_notes"]


def schedule_calendar(db, ctx, data):
    st.header("Equipment Schedule")

    col_filter, col_actions = st.columns([3, 2])
    with col_filter:
        equipment_names = {eq.id: f"{eq.name} ({eq.equipment_id})" for eq in data.equipment}
        selected_id = st.selectbox(
            "Filter by equipment",
            options=[None] + list(equipment_names.keys()),
            format_func=lambda x: "All Equipment" if x is None else equipment_names[x],
            key="equipment_filter"
        )

    with col_actions:
        if ctx.can_edit:
            if st.button("➕ Add Schedule"):
                st.session_state["show_entry_form"] = True
            if ctx.is_admin and st.button("⚙️ Settings"):
                st.session_state["show_settings"] = True

    if ctx.can_edit and st.session_state.get("show_entry_form"):
        entry_form(db, ctx, data)

    if ctx.is_admin and st.session_state.get("show_settings"):
        settings_form(db, ctx, data.settings)

    entry_id = confirmed_value("delete_entry", "Are you sure you want to delete this schedule entry?")
    if entry_id and ctx.can_edit:
        result = run_mutation(lambda: remove_schedule_entry(db, ctx, entry_id), "Failed to delete schedule entry")
        finish_mutation(result)

    rows = build_grid(data.equipment, data.entries, data.settings, selected_id)
    if not rows:
        hint = " Add some equipment to get started." if ctx.can_edit else ""
        st.info("No equipment found." + hint)
        return

    schedule_grid(rows, can_edit=ctx.can_edit, on_delete=lambda entry: ask_confirmation("delete_entry", entry.id))

    with st.expander("Table view"):
        schedule_table(rows)


def entry_form(db, ctx, data):
    st.subheader("Add Schedule Entry")
    equipment_names = {eq.id: f"{eq.name} ({eq.equipment_id})" for eq in data.equipment}
    location_names = {loc.id: loc.job_name for loc in data.locations}
    hours = display_hours(data.settings)

    with st.form("entry_form"):
        col1, col2, col3 = st.columns(3)
        with col1:
            equipment_id = st.selectbox("Equipment", list(equipment_names.keys()), index=None,
                                        format_func=equipment_names.get, placeholder="Select equipment",
                                        key="entry_equipment")
            start_hour = st.selectbox("Start hour", hours, index=None, format_func=format_hour,
                                      placeholder="Start hour", key="entry_start")
        with col2:
            location_id = st.selectbox("Location", list(location_names.keys()), index=None,
                                       format_func=location_names.get, placeholder="Select location",
                                       key="entry_location")
            end_hour = st.selectbox("End hour", hours, index=None, format_func=format_hour,
                                    placeholder="End hour", key="entry_end")
        with col3:
            day_of_week = st.selectbox("Day", list(range(len(DAYS))), index=None,
                                       format_func=lambda d: DAYS[d], placeholder="Select day",
                                       key="entry_day")
            notes = st.text_input("Notes (optional)", key="entry_notes")

        col_cancel, col_submit = st.columns(2)
        cancelled = col_cancel.form_submit_button("Cancel")
        submitted = col_submit.form_submit_button("Add Entry", type="primary")

    if cancelled:
        st.session_state["show_entry_form"] = False
        st.rerun()

    if submitted:
        values = {
            "equipment_id": equipment_id,
            "location_id": location_id,
            "day_of_week": day_of_week,
            "start_hour": start_hour,
            "end_hour": end_hour,
            "notes": notes,
        }
        missing = missing_fields(values, ENTRY_FIELDS)
        if missing:
            st.warning("Please fill in: " + ", ".join(missing))
            return

        with st.spinner("Adding..."):
            result = run_mutation(lambda: add_schedule_entry(db, ctx, values), "Failed to add schedule entry")
        if result.ok:
            st.session_state["show_entry_form"] = False
        finish_mutation(result, ENTRY_FORM_KEYS)


def settings_form(db, ctx, settings):
    st.subheader("Schedule Settings")

    with st.form("settings_form"):
        col1, col2 = st.columns(2)
        with col1:
            start = st.selectbox(
                "Start Hour", START_HOUR_OPTIONS, format_func=format_hour,
                index=START_HOUR_OPTIONS.index(settings.start_hour) if settings.start_hour in START_HOUR_OPTIONS else 0
            )
        with col2:
            end = st.selectbox(
                "End Hour", END_HOUR_OPTIONS, format_func=format_hour,
                index=END_HOUR_OPTIONS.index(settings.end_hour) if settings.end_hour in END_HOUR_OPTIONS else len(END_HOUR_OPTIONS) - 1
            )

        col_cancel, col_submit = st.columns(2)
        cancelled = col_cancel.form_submit_button("Cancel")
        submitted = col_submit.form_submit_button("Update Settings", type="primary")

    if cancelled:
        st.session_state["show_settings"] = False
        st.rerun()

    if submitted:
        with st.spinner("Updating..."):
            result = run_mutation(lambda: change_settings(db, ctx, start, end), "Failed to update settings")
        if result.ok:
            st.session_state["show_settings"] = False
        finish_mutation(result)
