"""
Database Seeding Script
Creates database tables, the default departments and an admin account.
Safe to run more than once.
"""

import sys

from sqlalchemy.orm import Session

from tasktracker.config.settings import settings
from tasktracker.database import Base, engine, SessionLocal
from tasktracker.models import Department, User, UserRole
from tasktracker.utils.security import hash_password


def create_tables():
    print(f"\n{'='*60}")
    print("🚀 Creating Database Tables")
    print(f"{'='*60}")
    Base.metadata.create_all(bind=engine)
    print("✅ All tables created successfully!")


def seed_departments(db: Session) -> int:
    """Insert any default department that is missing; returns how many were added"""
    existing = {name for (name,) in db.query(Department.name).all()}
    added = 0
    for name in settings.DEFAULT_DEPARTMENTS:
        if name not in existing:
            db.add(Department(name=name))
            added += 1
    db.commit()
    print(f"✅ Departments: {added} added, {len(existing)} already present")
    return added


def seed_admin(db: Session) -> bool:
    """Create the default admin user unless that email is taken"""
    admin = settings.ADMIN
    email = admin["email"].strip().lower()

    if db.query(User).filter(User.email == email).first():
        print("ℹ️  Admin user already exists")
        return False

    db.add(User(
        name=admin["name"],
        email=email,
        hashed_password=hash_password(admin["password"]),
        department=admin["department"],
        role=UserRole.ADMIN.value,
    ))
    db.commit()
    print("✅ Default admin user created!")
    print(f"   Email: {email}")
    return True


def main() -> int:
    try:
        create_tables()
        db = SessionLocal()
        try:
            seed_departments(db)
            seed_admin(db)
        finally:
            db.close()
    except Exception as e:
        print(f"❌ Error seeding database: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
