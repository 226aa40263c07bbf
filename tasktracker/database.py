from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from tasktracker.config.settings import settings

# Postgres on Render and similar hosts needs sslmode=require
if settings.is_sqlite():
    connect_args = {"check_same_thread": False}
else:
    connect_args = {"sslmode": "require"}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
