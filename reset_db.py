# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

# reset_db.py
from dayplanner.config import Settings
from dayplanner.models.database import Base, create_tables, make_engine

if __name__ == "__main__":
    settings = Settings.from_env()
    engine = make_engine(settings.DATABASE_URL)

    print(f"⚠️ Dropping all planner tables on {engine.url.render_as_string(hide_password=True)}...")
    create_tables(engine)  # registers models so drop_all sees every table
    Base.metadata.drop_all(bind=engine)

    print("✅ Recreating tables from models...")
    create_tables(engine)

    print("✅ Database reset complete.")
