import streamlit as st
import sys
import os
import logging

# Ensure project root is in path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy.exc import SQLAlchemyError

from core.auth import AuthSession
from core.config import Config, configure_logging
from core.database import SessionLocal, get_db
from core.loader import fetch_dashboard
from core.roles import SessionContext
from ui.auth_page import auth_page
from ui.components import role_label
from ui.equipment_page import equipment_page
from ui.locations_page import locations_page
from ui.schedule_calendar import schedule_calendar
from ui.user_management import user_management
from scripts.init_db import init_db

configure_logging()
logger = logging.getLogger("equipment_schedule")


@st.cache_resource
def prepare_database():
    # Once per server process; init_db is idempotent
    init_db()


def _log_auth_change(user):
    if user is None:
        logger.info("Session cleared")
    else:
        logger.info("Signed in as %s", user.email)


def main():
    st.set_page_config(page_title=Config.APP_NAME, layout="wide")
    prepare_database()

    if "user" not in st.session_state:
        st.session_state["user"] = None

    auth_session = AuthSession(st.session_state)
    auth_session.subscribe(_log_auth_change)

    db = next(get_db())

    if auth_session.get_current_user() is None:
        auth_page(db, auth_session)
        return

    try:
        profile = auth_session.load_profile(db)
    except SQLAlchemyError:
        logger.exception("Error loading the user profile")
        st.error("Failed to load your profile. Please reload the page.")
        return
    user = auth_session.get_current_user()
    if user is None:
        # Account vanished since the last run
        st.rerun()

    ctx = SessionContext.build(user, profile)

    # Sidebar with user info
    with st.sidebar:
        st.title(ctx.display_name)
        if profile is not None:
            st.write(f"Role: {role_label(profile.role)}")
        if st.button("Sign Out"):
            auth_session.sign_out()
            st.rerun()

    if profile is None:
        st.warning("Your account has no profile yet. Contact your administrator.")
        return

    st.title(Config.APP_NAME)
    st.caption("Professional Equipment Management")

    try:
        with st.spinner("Loading..."):
            data = fetch_dashboard(SessionLocal)
    except SQLAlchemyError:
        logger.exception("Error fetching data")
        st.error("Failed to load schedule data. Please reload the page.")
        return

    # Tabs depend on what the role may do
    pages = [("📅 Schedule", lambda: schedule_calendar(db, ctx, data))]
    if ctx.can_edit:
        pages.append(("🔧 Equipment", lambda: equipment_page(db, ctx, data.equipment)))
        pages.append(("📍 Locations", lambda: locations_page(db, ctx, data.locations)))
    if ctx.is_admin:
        pages.append(("👥 Users", lambda: user_management(db, ctx)))

    tabs = st.tabs([label for label, _ in pages])
    for tab, (_, render) in zip(tabs, pages):
        with tab:
            render()


if __name__ == "__main__":
    main()
