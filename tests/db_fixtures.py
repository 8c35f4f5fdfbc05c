import os
import shutil
import sys
import tempfile
import unittest

sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from sqlalchemy.orm import sessionmaker

from core.database import Base, make_engine
from core.models import Role
from core.roles import SessionContext
import core.models  # noqa: F401


def context_for(role, user_id="u-self"):
    """SessionContext for a signed-in user with the given role."""
    profile = type("Profile", (), {"id": user_id, "role": role, "full_name": "Test User"})()
    user = type("User", (), {"id": user_id, "email": "test@example.com"})()
    return SessionContext.build(user, profile)


ADMIN = Role.ADMIN
EDITOR = Role.EDITOR
VIEWER = Role.VIEWER


class DatabaseTestCase(unittest.TestCase):
    """Each test gets its own throwaway SQLite file."""

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.engine = make_engine(f"sqlite:///{os.path.join(self.tmpdir, 'test.db')}")
        Base.metadata.create_all(bind=self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db = self.SessionLocal()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()
        shutil.rmtree(self.tmpdir, ignore_errors=True)
