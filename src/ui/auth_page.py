import logging

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from core.auth import invitation_role, sign_in, sign_up
from core.config import Config
from core.errors import AuthError, StoreError
from core.models import Role

logger = logging.getLogger(__name__)


def auth_page(db, auth_session):
    role = invitation_role(st.query_params.get("role"))

    st.title(Config.APP_NAME)
    st.caption("Professional equipment scheduling system")
    if role != Role.VIEWER:
        st.info(f"You've been invited as an {role.value}")

    tab_login, tab_register = st.tabs(["Sign In", "Sign Up"])

    with tab_login:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign In", type="primary")

        if submitted:
            try:
                user = sign_in(db, email, password, requested_role=role)
            except (AuthError, StoreError) as e:
                logger.info("Sign-in failed for %s: %s", email, e)
                st.error(str(e) if isinstance(e, AuthError) else "Sign-in failed. Please try again.")
            except SQLAlchemyError:
                logger.exception("Sign-in lookup failed for %s", email)
                st.error("Sign-in failed. Please try again.")
            else:
                auth_session.set_user(user)
                st.query_params.clear()
                st.rerun()

    with tab_register:
        with st.form("register_form"):
            full_name = st.text_input("Full Name")
            new_email = st.text_input("Email", key="register_email")
            new_password = st.text_input("Password", type="password", key="register_password")
            confirm_password = st.text_input("Confirm Password", type="password")
            registered = st.form_submit_button("Sign Up")

        if registered:
            if not new_email or not new_password:
                st.error("Please fill in email and password.")
                return

            if new_password != confirm_password:
                st.error("Passwords do not match.")
                return

            try:
                user = sign_up(db, new_email, new_password, full_name=full_name, requested_role=role)
            except (AuthError, StoreError) as e:
                logger.warning("Sign-up failed for %s: %s", new_email, e)
                st.error(str(e) if isinstance(e, AuthError) else "Sign-up failed. Please try again.")
            except SQLAlchemyError:
                logger.exception("Sign-up lookup failed for %s", new_email)
                st.error("Sign-up failed. Please try again.")
            else:
                auth_session.set_user(user)
                st.query_params.clear()
                st.rerun()

    st.caption("New to ASM Equipment Schedule? Contact your administrator for an invitation.")
