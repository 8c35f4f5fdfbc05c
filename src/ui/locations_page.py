import streamlit as st

from core.actions import add_location, remove_location
from core.forms import missing_fields, run_mutation, LOCATION_FIELDS
from ui.components import ask_confirmation, confirmed_value, finish_mutation

LOCATION_FORM_KEYS = ["location_job_name", "location_address"]


def locations_page(db, ctx, locations):
    st.header("Location Management")

    if st.button("➕ Add Location"):
        st.session_state["show_location_form"] = True

    if st.session_state.get("show_location_form"):
        location_form(db, ctx)

    location_id = confirmed_value(
        "delete_location",
        "Are you sure you want to delete this location? Its schedule entries are deleted too."
    )
    if location_id:
        result = run_mutation(lambda: remove_location(db, ctx, location_id), "Failed to delete location")
        finish_mutation(result)

    if not locations:
        st.info("No locations found. Add your first location to get started.")
        return

    for loc in locations:
        with st.container(border=True):
            col_info, col_delete = st.columns([6, 1])
            with col_info:
                st.subheader(loc.job_name)
                st.write(loc.address)
                st.caption(f"Added {loc.created_at:%Y-%m-%d}")
            with col_delete:
                if st.button("🗑", key=f"delete_location_{loc.id}", help="Delete location"):
                    ask_confirmation("delete_location", loc.id)


def location_form(db, ctx):
    st.subheader("Add Location")
    with st.form("location_form"):
        job_name = st.text_input("Job Name *", key="location_job_name")
        address = st.text_input("Full Address *", key="location_address")

        col_cancel, col_submit = st.columns(2)
        cancelled = col_cancel.form_submit_button("Cancel")
        submitted = col_submit.form_submit_button("Add Location", type="primary")

    if cancelled:
        st.session_state["show_location_form"] = False
        st.rerun()

    if submitted:
        values = {"job_name": job_name, "address": address}
        missing = missing_fields(values, LOCATION_FIELDS)
        if missing:
            st.warning("Please fill in: " + ", ".join(missing))
            return

        with st.spinner("Adding..."):
            result = run_mutation(lambda: add_location(db, ctx, values), "Failed to create location")
        if result.ok:
            st.session_state["show_location_form"] = False
        finish_mutation(result, LOCATION_FORM_KEYS)
