"""
Initialize the Chirp database with the post table.
Run this once against the database in DATABASE_URL (Neon/Postgres or the
local SQLite file):

    python database/init_db.py
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from api.config import DATABASE_URL  # noqa: E402
from api.db import engine, init_db  # noqa: E402

if __name__ == "__main__":
    print(f"Connecting to database ({engine.url.render_as_string(hide_password=True)})...")
    init_db()
    print("✓ Database initialized successfully!")
    print("Tables created: post")
    if DATABASE_URL.startswith("sqlite"):
        print(f"SQLite file: {engine.url.database}")
