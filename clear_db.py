"""Script to clear the job board application tables."""

import sqlite3
from pathlib import Path

from jobboard.config import settings

TABLES = ("applications", "general_profiles")


def clear_tables(db_path=None):
    # Get the database path
    db_path = Path(db_path or settings.database_path)

    if not db_path.exists():
        print(f"Database not found at {db_path}")
        return

    try:
        # Connect to the database
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()

        # Clear the tables
        for table in TABLES:
            cursor.execute(f"DELETE FROM {table};")

        # Expired sessions are dropped as well
        cursor.execute("DELETE FROM sessions WHERE datetime(expires_at) <= datetime('now');")

        # Commit the changes
        conn.commit()

        # Vacuum the database to reclaim space
        cursor.execute("VACUUM;")

        print(f"Successfully cleared {', '.join(TABLES)} tables")

    except sqlite3.Error as e:
        print(f"Error clearing tables: {e}")
    finally:
        if "conn" in locals():
            conn.close()


if __name__ == "__main__":
    clear_tables()
