import os
import unittest

from db_fixtures import DatabaseTestCase

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core import crud
from core.database import make_engine
from core.hours import ScheduleSettings
from core.loader import fetch_dashboard
from core.models import Role
from scripts.init_db import init_db


class TestFetchDashboard(DatabaseTestCase):
    def test_loads_all_collections(self):
        crane = crud.create_equipment(self.db, "Crane", "Tower crane", "C-1")
        crud.create_equipment(self.db, "Auger", "Drill", "A-1")
        site = crud.create_location(self.db, "Harbor", "1 Dock Rd")
        crud.create_schedule_entry(self.db, crane.id, site.id, 4, 8, 10)
        crud.create_schedule_entry(self.db, crane.id, site.id, 2, 13, 15)
        crud.update_schedule_settings(self.db, 7, 19)

        data = fetch_dashboard(self.SessionLocal)

        self.assertEqual([eq.name for eq in data.equipment], ["Auger", "Crane"])
        self.assertEqual([loc.job_name for loc in data.locations], ["Harbor"])
        self.assertEqual([e.day_of_week for e in data.entries], [2, 4])
        # Joined rows stay readable after the fetch sessions are closed
        self.assertEqual(data.entries[0].location.job_name, "Harbor")
        self.assertEqual(data.settings, ScheduleSettings(7, 19))

    def test_empty_store_uses_default_range(self):
        data = fetch_dashboard(self.SessionLocal)
        self.assertEqual(data.equipment, [])
        self.assertEqual(data.entries, [])
        self.assertEqual(data.settings, ScheduleSettings(6, 18))

    def test_failure_is_raised(self):
        bare = make_engine(f"sqlite:///{os.path.join(self.tmpdir, 'empty.db')}")
        try:
            with self.assertRaises(SQLAlchemyError):
                fetch_dashboard(sessionmaker(bind=bare))
        finally:
            bare.dispose()


class TestInitDb(DatabaseTestCase):
    def test_seeds_admin_and_settings_once(self):
        init_db(bind=self.engine, session_factory=self.SessionLocal)
        init_db(bind=self.engine, session_factory=self.SessionLocal)

        profiles = crud.get_all_profiles(self.db)
        self.assertEqual(len(profiles), 1)
        self.assertEqual(profiles[0].role, Role.ADMIN)
        self.assertEqual(crud.get_schedule_settings(self.db), ScheduleSettings(6, 18))
        self.assertEqual(crud.get_setting(self.db, "start_hour"), "6")


if __name__ == '__main__':
    unittest.main()
