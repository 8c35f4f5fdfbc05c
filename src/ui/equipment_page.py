import streamlit as st
import pandas as pd

from core.actions import add_equipment, remove_equipment
from core.forms import missing_fields, run_mutation, EQUIPMENT_FIELDS
from ui.components import ask_confirmation, confirmed_value, finish_mutation

EQUIPMENT_FORM_KEYS = ["equipment_name", "equipment_type", "equipment_tag", "equipment_description"]


def equipment_page(db, ctx, equipment):
    st.header("Equipment Management")

    if st.button("➕ Add Equipment"):
        st.session_state["show_equipment_form"] = True

    if st.session_state.get("show_equipment_form"):
        equipment_form(db, ctx)

    item_id = confirmed_value(
        "delete_equipment",
        "Are you sure you want to delete this equipment? Its schedule entries are deleted too."
    )
    if item_id:
        result = run_mutation(lambda: remove_equipment(db, ctx, item_id), "Failed to delete equipment")
        finish_mutation(result)

    if not equipment:
        st.info("No equipment found. Add your first piece of equipment to get started.")
        return

    for eq in equipment:
        with st.container(border=True):
            col_info, col_delete = st.columns([6, 1])
            with col_info:
                st.subheader(eq.name)
                st.write(f"ID: {eq.equipment_id}")
                st.write(f"Type: {eq.type}")
                if eq.description:
                    st.write(eq.description)
                st.caption(f"Added {eq.created_at:%Y-%m-%d}")
            with col_delete:
                if st.button("🗑", key=f"delete_equipment_{eq.id}", help="Delete equipment"):
                    ask_confirmation("delete_equipment", eq.id)

    with st.expander("Table view"):
        data = [
            {"Name": eq.name, "Equipment ID": eq.equipment_id, "Type": eq.type,
             "Description": eq.description or "", "Added": eq.created_at}
            for eq in equipment
        ]
        st.dataframe(pd.DataFrame(data), use_container_width=True)


def equipment_form(db, ctx):
    st.subheader("Add Equipment")
    with st.form("equipment_form"):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Equipment Name *", key="equipment_name")
            equipment_id = st.text_input("Equipment ID * (must be unique)", key="equipment_tag")
        with col2:
            type_ = st.text_input("Equipment Type *", key="equipment_type")
            description = st.text_input("Description (optional)", key="equipment_description")

        col_cancel, col_submit = st.columns(2)
        cancelled = col_cancel.form_submit_button("Cancel")
        submitted = col_submit.form_submit_button("Add Equipment", type="primary")

    if cancelled:
        st.session_state["show_equipment_form"] = False
        st.rerun()

    if submitted:
        values = {"name": name, "type": type_, "equipment_id": equipment_id, "description": description}
        missing = missing_fields(values, EQUIPMENT_FIELDS)
        if missing:
            st.warning("Please fill in: " + ", ".join(missing))
            return

        with st.spinner("Adding..."):
            result = run_mutation(
                lambda: add_equipment(db, ctx, values),
                "Failed to create equipment. Make sure the Equipment ID is unique."
            )
        if result.ok:
            st.session_state["show_equipment_form"] = False
        finish_mutation(result, EQUIPMENT_FORM_KEYS)
