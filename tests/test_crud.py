import unittest

from db_fixtures import DatabaseTestCase

from core import crud
from core.errors import StoreError, ValidationError
from core.hours import ScheduleSettings
from core.models import Role, ScheduleEntry, KEY_START_HOUR


class TestEquipment(DatabaseTestCase):
    def test_list_is_ordered_by_name(self):
        crud.create_equipment(self.db, "Loader", "Wheel loader", "L-1")
        crud.create_equipment(self.db, "Crane", "Tower crane", "C-1", description="50t")
        names = [eq.name for eq in crud.get_all_equipment(self.db)]
        self.assertEqual(names, ["Crane", "Loader"])

    def test_blank_description_is_stored_as_null(self):
        item = crud.create_equipment(self.db, "Crane", "Tower crane", "C-1", description="")
        self.assertIsNone(item.description)
        self.assertIsNotNone(item.created_at)
        self.assertEqual(len(item.id), 36)

    def test_duplicate_equipment_id_is_rejected(self):
        crud.create_equipment(self.db, "Crane A", "Tower crane", "C-1")
        before = [eq.id for eq in crud.get_all_equipment(self.db)]

        with self.assertRaises(StoreError):
            crud.create_equipment(self.db, "Crane B", "Tower crane", "C-1")

        # Session is still usable and nothing changed
        after = [eq.id for eq in crud.get_all_equipment(self.db)]
        self.assertEqual(before, after)

    def test_delete_removes_its_schedule_entries(self):
        crane = crud.create_equipment(self.db, "Crane", "Tower crane", "C-1")
        site = crud.create_location(self.db, "Harbor", "1 Dock Rd")
        crud.create_schedule_entry(self.db, crane.id, site.id, 1, 9, 11)

        crud.delete_equipment(self.db, crane.id)

        self.assertEqual(crud.get_all_equipment(self.db), [])
        self.assertEqual(self.db.query(ScheduleEntry).count(), 0)
        self.assertEqual(len(crud.get_all_locations(self.db)), 1)

    def test_delete_unknown_id_is_a_no_op(self):
        crud.delete_equipment(self.db, "does-not-exist")


class TestLocations(DatabaseTestCase):
    def test_list_is_ordered_by_job_name(self):
        crud.create_location(self.db, "Tunnel", "9 Rock St")
        crud.create_location(self.db, "Bridge", "2 River Rd")
        self.assertEqual([loc.job_name for loc in crud.get_all_locations(self.db)], ["Bridge", "Tunnel"])

    def test_delete_location(self):
        site = crud.create_location(self.db, "Bridge", "2 River Rd")
        crud.delete_location(self.db, site.id)
        self.assertEqual(crud.get_all_locations(self.db), [])

    def test_delete_removes_entries_booked_there(self):
        crane = crud.create_equipment(self.db, "Crane", "Tower crane", "C-1")
        harbor = crud.create_location(self.db, "Harbor", "1 Dock Rd")
        bridge = crud.create_location(self.db, "Bridge", "2 River Rd")
        crud.create_schedule_entry(self.db, crane.id, harbor.id, 1, 9, 11)
        crud.create_schedule_entry(self.db, crane.id, harbor.id, 3, 7, 8)
        kept = crud.create_schedule_entry(self.db, crane.id, bridge.id, 2, 9, 11)

        crud.delete_location(self.db, harbor.id)

        self.assertEqual([e.id for e in crud.get_schedule_entries(self.db)], [kept.id])
        self.assertEqual([eq.name for eq in crud.get_all_equipment(self.db)], ["Crane"])


class TestScheduleEntries(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.crane = crud.create_equipment(self.db, "Crane", "Tower crane", "C-1")
        self.site = crud.create_location(self.db, "Harbor", "1 Dock Rd")

    def test_entries_ordered_by_day_then_start(self):
        crud.create_schedule_entry(self.db, self.crane.id, self.site.id, 3, 8, 9)
        crud.create_schedule_entry(self.db, self.crane.id, self.site.id, 1, 14, 15)
        crud.create_schedule_entry(self.db, self.crane.id, self.site.id, 1, 9, 11, notes="early")

        entries = crud.get_schedule_entries(self.db)
        self.assertEqual([(e.day_of_week, e.start_hour) for e in entries], [(1, 9), (1, 14), (3, 8)])
        self.assertEqual(entries[0].location.job_name, "Harbor")
        self.assertEqual(entries[0].equipment.equipment_id, "C-1")
        self.assertEqual(entries[0].notes, "early")

    def test_overlapping_entries_coexist(self):
        crud.create_schedule_entry(self.db, self.crane.id, self.site.id, 2, 9, 12)
        crud.create_schedule_entry(self.db, self.crane.id, self.site.id, 2, 10, 11)
        self.assertEqual(len(crud.get_schedule_entries(self.db)), 2)

    def test_inverted_range_is_accepted(self):
        entry = crud.create_schedule_entry(self.db, self.crane.id, self.site.id, 2, 12, 10)
        self.assertEqual((entry.start_hour, entry.end_hour), (12, 10))

    def test_day_out_of_range_is_rejected(self):
        with self.assertRaises(StoreError):
            crud.create_schedule_entry(self.db, self.crane.id, self.site.id, 7, 9, 10)

    def test_unknown_equipment_is_rejected(self):
        with self.assertRaises(StoreError):
            crud.create_schedule_entry(self.db, "missing", self.site.id, 1, 9, 10)

    def test_delete_entry(self):
        entry = crud.create_schedule_entry(self.db, self.crane.id, self.site.id, 1, 9, 10)
        crud.delete_schedule_entry(self.db, entry.id)
        self.assertEqual(crud.get_schedule_entries(self.db), [])


class TestSettings(DatabaseTestCase):
    def test_defaults_when_missing(self):
        self.assertEqual(crud.get_schedule_settings(self.db), ScheduleSettings(6, 18))

    def test_update_is_idempotent(self):
        crud.update_schedule_settings(self.db, 7, 17)
        first = crud.get_schedule_settings(self.db)
        crud.update_schedule_settings(self.db, 7, 17)
        self.assertEqual(crud.get_schedule_settings(self.db), first)
        self.assertEqual(first, ScheduleSettings(7, 17))

    def test_midnight_start_is_kept(self):
        crud.update_schedule_settings(self.db, 0, 23)
        self.assertEqual(crud.get_schedule_settings(self.db), ScheduleSettings(0, 23))

    def test_invalid_range_writes_nothing(self):
        for start, end in [(10, 10), (12, 8), (-1, 5), (5, 24)]:
            with self.assertRaises(ValidationError):
                crud.update_schedule_settings(self.db, start, end)
        self.assertEqual(crud.get_setting(self.db, KEY_START_HOUR), "")

    def test_garbage_value_falls_back_to_default(self):
        crud.set_setting(self.db, KEY_START_HOUR, "noon")
        self.assertEqual(crud.get_schedule_settings(self.db).start_hour, 6)

    def test_init_settings_keeps_existing_values(self):
        crud.update_schedule_settings(self.db, 8, 16)
        crud.init_settings(self.db)
        self.assertEqual(crud.get_schedule_settings(self.db), ScheduleSettings(8, 16))


class TestProfiles(DatabaseTestCase):
    def test_update_user_role(self):
        user = crud.create_auth_user(self.db, "a@example.com", "hash")
        crud.create_user_profile(self.db, user.id, full_name="Ann")

        profile = crud.update_user_role(self.db, user.id, Role.EDITOR)
        self.assertEqual(profile.role, Role.EDITOR)
        self.assertEqual(crud.get_user_profile(self.db, user.id).email, "a@example.com")

    def test_update_unknown_user_returns_none(self):
        self.assertIsNone(crud.update_user_role(self.db, "nobody", Role.ADMIN))


if __name__ == '__main__':
    unittest.main()
