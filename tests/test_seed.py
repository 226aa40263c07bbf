from seed_all import seed_admin, seed_departments
from tasktracker.config.settings import Settings
from tasktracker.models import Department, User
from tasktracker.utils.security import verify_password


def test_seeding_is_idempotent(db):
    assert seed_departments(db) == len(Settings.DEFAULT_DEPARTMENTS)
    assert seed_admin(db) is True

    assert seed_departments(db) == 0
    assert seed_admin(db) is False

    assert db.query(Department).count() == len(Settings.DEFAULT_DEPARTMENTS)
    admins = db.query(User).filter(User.role == "admin").all()
    assert len(admins) == 1
    assert verify_password(Settings.ADMIN["password"], admins[0].hashed_password)


def test_seed_keeps_existing_departments(db, departments):
    added = seed_departments(db)
    # "Human Resources" is both a fixture and a default
    assert added == len(Settings.DEFAULT_DEPARTMENTS) - 1
