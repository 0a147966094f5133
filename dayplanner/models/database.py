# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# ✅ Base model
Base = declarative_base()


def make_engine(database_url: str):
    if database_url.startswith("sqlite"):
        # SQLite is used for local dev and tests only
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # ✅ Engine with a pooled Postgres connection
    return create_engine(
        database_url,
        pool_size=10,          # Keep 10 connections open
        max_overflow=20,       # Allow 20 extra if under load
        pool_recycle=1800,     # Recycle every 30 mins
        pool_pre_ping=True     # Validate before using connection
    )


def make_session_factory(engine):
    # ✅ Session factory
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine):
    # Imported here so every model is registered on Base before create_all
    from dayplanner import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
