import urllib.parse

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from rewards_platform.config import get_settings

DATABASE_URL = get_settings().database_url

connect_args = {}
if DATABASE_URL.startswith("postgres"):
    # Ensure proper encoding by parsing and reconstructing the URL
    try:
        DATABASE_URL = urllib.parse.urlunparse(urllib.parse.urlparse(DATABASE_URL))
    except ValueError:
        DATABASE_URL = DATABASE_URL.encode("utf-8", errors="replace").decode("utf-8")
    connect_args = {"options": "-c timezone=utc"}
elif DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
