import streamlit as st

from core.forms import MutationResult
from core.grid import GridRow, grid_frame
from core.hours import DAYS, format_hour
from core.roles import ROLE_LABELS, parse_role

HOUR_HEIGHT_PX = 60

ROLE_ICONS = {"admin": "👑", "editor": "✏️", "viewer": "👁️"}


def role_label(role) -> str:
    role = parse_role(role)
    return f"{ROLE_ICONS[role.value]} {ROLE_LABELS[role]}"


def reset_form(keys):
    """Drop widget values so the next run draws the form empty."""
    for key in keys:
        if key in st.session_state:
            del st.session_state[key]


def finish_mutation(result: MutationResult, form_keys=()):
    """On success clear the form and rerun (which re-fetches everything); on failure keep the form."""
    if result.ok:
        reset_form(form_keys)
        st.rerun()
    else:
        st.error(result.error)


def ask_confirmation(key, value):
    """Park a value until the user confirms it (stands in for a browser confirm())."""
    st.session_state[f"confirm_{key}"] = value
    st.rerun()


def confirmed_value(key, prompt):
    """
    Shows the pending confirmation for `key`, if any.
    Returns the parked value on the run where the user confirms, else None.
    """
    pending_key = f"confirm_{key}"
    value = st.session_state.get(pending_key)
    if value is None:
        return None

    st.warning(prompt)
    col_yes, col_no = st.columns(2)
    with col_yes:
        if st.button("Yes", key=f"{pending_key}_yes", type="primary"):
            st.session_state[pending_key] = None
            return value
    with col_no:
        if st.button("Cancel", key=f"{pending_key}_no"):
            st.session_state[pending_key] = None
            st.rerun()
    return None


def schedule_grid(rows, can_edit=False, on_delete=None):
    """
    Renders the weekly calendar: one row per equipment item, one column per
    day, each entry drawn once with a height proportional to its duration.
    rows: List of GridRow from core.grid.build_grid.
    """
    header = st.columns([2] + [1] * len(DAYS))
    header[0].markdown("**Equipment**")
    for col, day in zip(header[1:], DAYS):
        col.markdown(f"**{day}**")

    for row in rows:
        _grid_row(row, can_edit, on_delete)


def _grid_row(row: GridRow, can_edit, on_delete):
    eq = row.equipment
    cols = st.columns([2] + [1] * len(DAYS))
    with cols[0]:
        st.markdown(f"**{eq.name}**")
        st.caption(f"{eq.equipment_id} · {eq.type}")

    for day_idx, col in enumerate(cols[1:]):
        with col:
            for placement in row.days[day_idx]:
                entry = placement.entry
                with st.container(border=True, height=placement.height(HOUR_HEIGHT_PX)):
                    job = entry.location.job_name if entry.location else "Reserved"
                    st.markdown(f"**{job}**")
                    st.caption(f"{format_hour(entry.start_hour)} - {format_hour(entry.end_hour)}")
                    if entry.notes:
                        st.caption(entry.notes)
                    if can_edit and on_delete is not None:
                        if st.button("🗑", key=f"delete_entry_{entry.id}",
                                     help="Delete this schedule entry"):
                            on_delete(entry)
    st.divider()


def schedule_table(rows):
    """Read-only compact version of the calendar."""
    st.dataframe(grid_frame(rows), use_container_width=True)
