import logging

import streamlit as st
import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from core.actions import change_user_role, create_invitation
from core.crud import get_all_profiles
from core.forms import run_mutation
from core.models import Role
from core.roles import ROLE_LABELS
from ui.components import ask_confirmation, confirmed_value, finish_mutation, reset_form, role_label

logger = logging.getLogger(__name__)

ROLE_OPTIONS = [Role.VIEWER, Role.EDITOR, Role.ADMIN]


def user_management(db, ctx):
    if not ctx.is_admin:
        st.info("You don't have permission to view user management.")
        return

    st.header("User Management")

    tab_users, tab_invite = st.tabs(["Users", "Invite User"])

    with tab_users:
        users_list(db, ctx)

    with tab_invite:
        invite_form(ctx)


def users_list(db, ctx):
    pending = confirmed_value("change_role", "Are you sure you want to change this user's role?")
    if pending:
        user_id, new_role = pending
        result = run_mutation(lambda: change_user_role(db, ctx, user_id, new_role), "Failed to update user role")
        finish_mutation(result)

    try:
        profiles = get_all_profiles(db)
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        st.error("Failed to load users")
        return

    if not profiles:
        st.info("No users found. Start by inviting team members.")
        return

    user_data = [
        {
            "Name": p.full_name or "Unnamed User",
            "Email": p.email,
            "Role": ROLE_LABELS[p.role],
            "Joined": p.created_at,
        }
        for p in profiles
    ]
    st.dataframe(pd.DataFrame(user_data), use_container_width=True)

    st.divider()
    for p in profiles:
        with st.container(border=True):
            col_info, col_role = st.columns([3, 1])
            with col_info:
                st.markdown(f"**{p.full_name or 'Unnamed User'}** {role_label(p.role)}")
                st.caption(p.email)
                st.caption(f"Joined {p.created_at:%Y-%m-%d}")
            with col_role:
                # Admins cannot change their own role
                if p.id != ctx.user_id:
                    new_role = st.selectbox(
                        "Role", ROLE_OPTIONS,
                        index=ROLE_OPTIONS.index(p.role),
                        format_func=lambda r: ROLE_LABELS[r],
                        key=f"role_{p.id}",
                        label_visibility="collapsed"
                    )
                    if new_role != p.role:
                        # Put the widget back until the change is confirmed
                        reset_form([f"role_{p.id}"])
                        ask_confirmation("change_role", (p.id, new_role))


def invite_form(ctx):
    st.subheader("Invite New User")
    with st.form("invite_form"):
        email = st.text_input("Email address", key="invite_email")
        role = st.selectbox("Role", ROLE_OPTIONS, format_func=lambda r: ROLE_LABELS[r], key="invite_role")
        submitted = st.form_submit_button("Create Invitation", type="primary")

    if submitted:
        result = run_mutation(lambda: create_invitation(ctx, email, role), "Failed to create invitation")
        if not result.ok:
            st.error(result.error)
            return
        st.success(f"Send this signup link to {email.strip()}:")
        st.code(result.data)
        st.caption(f"They will be assigned the {role.value} role after signup.")
