import json
import logging
import os
import sqlite3
from contextlib import contextmanager

import config
from country import Country

logger = logging.getLogger(__name__)


class StoreInitError(Exception):
    """Raised when the country store cannot be opened at startup."""


class DatabaseManager:
    def __init__(self, database=config.DATABASE):
        self.db_name = database

    def connect(self):
        """Check the store is reachable and make sure the table exists."""
        try:
            with self.session() as conn:
                conn.execute("SELECT 1")
            self.create_schema()
        except sqlite3.Error as e:
            logger.error(f"Database error opening {self.db_name}: {e}")
            raise StoreInitError(f"Could not open database {self.db_name}: {e}") from e
        logger.info(f"Connected to database: {self.db_name}")
        return self

    @contextmanager
    def session(self):
        conn = sqlite3.connect(self.db_name)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def create_schema(self):
        with self.session() as conn:
            conn.execute('''
            CREATE TABLE IF NOT EXISTS country (
                code TEXT PRIMARY KEY CHECK (length(code) = 3),
                name TEXT NOT NULL,
                internetUsers REAL,
                adultLiteracyRate REAL
            )
            ''')
        logger.info("Country table ready.")

    def fetch_all(self):
        with self.session() as conn:
            rows = conn.execute(
                "SELECT code, name, internetUsers, adultLiteracyRate FROM country"
            ).fetchall()
        return [Country.from_row(row) for row in rows]

    def fetch_by_code(self, code):
        """Return the country stored under ``code``, or None."""
        with self.session() as conn:
            row = conn.execute(
                "SELECT code, name, internetUsers, adultLiteracyRate FROM country WHERE code = ?",
                (code,)
            ).fetchone()
        if row is None:
            return None
        return Country.from_row(row)

    def create(self, country):
        with self.session() as conn:
            conn.execute('''
                INSERT INTO country (code, name, internetUsers, adultLiteracyRate)
                VALUES (?, ?, ?, ?)
            ''', (
                country.code,
                country.name,
                country.internet_users,
                country.adult_literacy_rate
            ))
        logger.info(f"Created country {country.code}")

    def update(self, country):
        with self.session() as conn:
            cur = conn.execute('''
                UPDATE country
                SET name = ?, internetUsers = ?, adultLiteracyRate = ?
                WHERE code = ?
            ''', (
                country.name,
                country.internet_users,
                country.adult_literacy_rate,
                country.code
            ))
            updated = cur.rowcount
        if updated == 0:
            logger.warning(f"Update of {country.code} matched no rows")
        else:
            logger.info(f"Updated country {country.code}")

    def delete(self, country):
        if country is None:
            raise ValueError("Cannot delete a country that was not found")
        with self.session() as conn:
            conn.execute("DELETE FROM country WHERE code = ?", (country.code,))
        logger.info(f"Deleted country {country.code}")

    def populate_from_json(self, json_file):
        """Insert the countries listed in ``json_file``, skipping existing codes.

        Returns the number of rows actually inserted.
        """
        if not os.path.exists(json_file):
            logger.error(f"Seed file {json_file} not found.")
            return 0

        with open(json_file, 'r', encoding='utf-8') as f:
            data = json.load(f)

        logger.info(f"Importing {len(data)} countries into database...")

        inserted = 0
        with self.session() as conn:
            for entry in data:
                cur = conn.execute('''
                    INSERT OR IGNORE INTO country
                    (code, name, internetUsers, adultLiteracyRate)
                    VALUES (?, ?, ?, ?)
                ''', (
                    entry['code'].upper(),
                    entry['name'],
                    entry.get('internetUsers'),
                    entry.get('adultLiteracyRate')
                ))
                inserted += cur.rowcount

        logger.info(f"Data population complete, {inserted} new rows.")
        return inserted

    def count(self):
        with self.session() as conn:
            return conn.execute("SELECT COUNT(*) FROM country").fetchone()[0]


if __name__ == "__main__":
    config.setup_logging(logging.getLogger())
    db = DatabaseManager(config.DATABASE).connect()

    # only seed an empty table
    if db.count() == 0:
        added = db.populate_from_json(config.SEED_FILE)
        print(f"Seeded {added} countries from {config.SEED_FILE}.")
    else:
        print(f"{config.DATABASE} already holds {db.count()} countries.")
