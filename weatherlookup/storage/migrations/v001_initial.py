"""Initial schema: forecast records and the lookup cache table."""

import sqlite3

DDL = [
    # Materialized forecasts, never updated in place
    """
    CREATE TABLE IF NOT EXISTS forecast_records (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        address TEXT NOT NULL,
        latitude REAL,
        longitude REAL,
        current_temperature REAL,
        high_temperature REAL,
        low_temperature REAL,
        condition TEXT,
        humidity INTEGER,
        wind_speed REAL,
        extended_forecast_json TEXT NOT NULL DEFAULT '[]',
        headline_json TEXT,
        retrieved_at TEXT NOT NULL,
        valid_until TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    (
        "CREATE INDEX IF NOT EXISTS idx_forecast_records_address "
        "ON forecast_records(address)"
    ),
    (
        "CREATE INDEX IF NOT EXISTS idx_forecast_records_coordinates "
        "ON forecast_records(latitude, longitude)"
    ),
    (
        "CREATE INDEX IF NOT EXISTS idx_forecast_records_valid_until "
        "ON forecast_records(valid_until)"
    ),
    (
        "CREATE INDEX IF NOT EXISTS idx_forecast_records_created_at "
        "ON forecast_records(created_at)"
    ),

    # Short-lived parsed upstream payloads
    """
    CREATE TABLE IF NOT EXISTS cache_entries (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        expires_at TEXT NOT NULL
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
