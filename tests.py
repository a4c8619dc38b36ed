import io
import json
import logging
import os
import sqlite3
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import MagicMock, patch

import config
from app import app, init_db
from country import Country
from country_manager import CountryManager
from country_stats import compute_statistics
from database_manager import DatabaseManager, StoreInitError
from display import display_countries, display_statistics, formatted_decimal
from validator import DataValidator

USA = Country("USA", "United States", 87.0, 99.0)
AFG = Country("AFG", "Afghanistan", 11.0, 43.0)


class DatabaseTestCase(unittest.TestCase):
    """Base case with a fresh SQLite file per test."""

    def setUp(self):
        fd, self.db_path = tempfile.mkstemp(suffix='.db')
        os.close(fd)
        self.db = DatabaseManager(self.db_path).connect()

    def tearDown(self):
        os.remove(self.db_path)

    def run_menu(self, *answers):
        """Drive the menu loop with scripted answers, return what it printed."""
        out = io.StringIO()
        with patch('builtins.input', side_effect=list(answers)), redirect_stdout(out):
            CountryManager(self.db).run()
        return out.getvalue()


class GatewayTestCase(DatabaseTestCase):

    def test_create_then_fetch_round_trip(self):
        print("\n[Test] Checking create/fetch round trip...")
        self.db.create(USA)
        self.assertEqual(self.db.fetch_by_code("USA"), USA)

    def test_nullable_metrics_round_trip(self):
        country = Country("ATA", "Antarctica")
        self.db.create(country)
        fetched = self.db.fetch_by_code("ATA")
        self.assertIsNone(fetched.internet_users)
        self.assertIsNone(fetched.adult_literacy_rate)

    def test_fetch_missing_code_returns_none(self):
        self.assertIsNone(self.db.fetch_by_code("ZZZ"))

    def test_fetch_all(self):
        self.db.create(USA)
        self.db.create(AFG)
        codes = sorted(c.code for c in self.db.fetch_all())
        self.assertEqual(codes, ["AFG", "USA"])

    def test_duplicate_code_raises(self):
        self.db.create(USA)
        with self.assertRaises(sqlite3.IntegrityError):
            self.db.create(Country("USA", "Duplicate"))

    def test_wrong_length_code_rejected_by_store(self):
        with self.assertRaises(sqlite3.IntegrityError):
            self.db.create(Country("USAA", "Too long"))
        self.assertEqual(self.db.count(), 0)

    def test_update_replaces_fields(self):
        self.db.create(USA)
        self.db.update(Country("USA", "America", 90.5, None))
        self.assertEqual(self.db.fetch_by_code("USA"), Country("USA", "America", 90.5, None))

    def test_update_of_missing_record_writes_nothing(self):
        with self.assertLogs('database_manager', level='WARNING'):
            self.db.update(USA)
        self.assertEqual(self.db.fetch_all(), [])

    def test_delete(self):
        self.db.create(USA)
        self.db.delete(self.db.fetch_by_code("USA"))
        self.assertIsNone(self.db.fetch_by_code("USA"))

    def test_delete_none_raises(self):
        with self.assertRaises(ValueError):
            self.db.delete(None)

    def test_failed_write_is_rolled_back(self):
        self.db.create(USA)
        with self.assertRaises(sqlite3.IntegrityError):
            with self.db.session() as conn:
                conn.execute("UPDATE country SET name = 'Changed' WHERE code = 'USA'")
                conn.execute("INSERT INTO country (code, name) VALUES ('USA', 'Again')")
        self.assertEqual(self.db.fetch_by_code("USA").name, "United States")

    def test_session_closes_connection_after_success(self):
        conn = MagicMock()
        with patch('database_manager.sqlite3.connect', return_value=conn):
            with self.db.session():
                pass
        conn.commit.assert_called_once_with()
        conn.rollback.assert_not_called()
        conn.close.assert_called_once_with()

    def test_session_closes_connection_after_failure(self):
        conn = MagicMock()
        with patch('database_manager.sqlite3.connect', return_value=conn):
            with self.assertRaises(RuntimeError):
                with self.db.session():
                    raise RuntimeError("write failed")
        conn.commit.assert_not_called()
        conn.rollback.assert_called_once_with()
        conn.close.assert_called_once_with()

    def test_populate_from_json_skips_existing(self):
        fd, seed_path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump([USA.to_dict(), {"code": "afg", "name": "Afghanistan"}], f)
        try:
            self.assertEqual(self.db.populate_from_json(seed_path), 2)
            self.assertEqual(self.db.populate_from_json(seed_path), 0)
        finally:
            os.remove(seed_path)
        self.assertEqual(self.db.fetch_by_code("AFG"), Country("AFG", "Afghanistan"))

    def test_populate_from_missing_file(self):
        self.assertEqual(self.db.populate_from_json("no_such_file.json"), 0)

    def test_unreachable_store_is_fatal(self):
        missing_dir = os.path.join(tempfile.gettempdir(), "no_such_dir_for_countries")
        with self.assertRaises(StoreInitError):
            DatabaseManager(os.path.join(missing_dir, "countries.db")).connect()


class StatisticsTestCase(unittest.TestCase):

    def test_example_pair(self):
        print("\n[Test] Checking statistics on USA/AFG...")
        stats = compute_statistics([USA, AFG])
        self.assertEqual(stats.average_internet_users, 49.0)
        self.assertEqual(stats.average_literacy_rate, 71.0)
        self.assertIs(stats.max_internet_users, USA)
        self.assertIs(stats.min_internet_users, AFG)
        self.assertIs(stats.max_literacy_rate, USA)
        self.assertIs(stats.min_literacy_rate, AFG)

    def test_empty_sequence(self):
        stats = compute_statistics([])
        self.assertEqual(stats.average_internet_users, 0.0)
        self.assertEqual(stats.average_literacy_rate, 0.0)
        self.assertIsNone(stats.max_internet_users)
        self.assertIsNone(stats.min_literacy_rate)

    def test_all_nulls_in_one_field(self):
        countries = [Country("AAA", "A", 10.0, None), Country("BBB", "B", 30.0, None)]
        stats = compute_statistics(countries)
        self.assertEqual(stats.average_literacy_rate, 0.0)
        self.assertIsNone(stats.max_literacy_rate)
        self.assertIsNone(stats.min_literacy_rate)
        self.assertEqual(stats.average_internet_users, 20.0)
        self.assertEqual(stats.max_internet_users.code, "BBB")

    def test_ties_keep_first_encountered(self):
        first = Country("AAA", "First", 50.0, 50.0)
        second = Country("BBB", "Second", 50.0, 50.0)
        stats = compute_statistics([first, second])
        self.assertIs(stats.max_internet_users, first)
        self.assertIs(stats.min_internet_users, first)


class DisplayTestCase(unittest.TestCase):

    def capture(self, func, *args):
        out = io.StringIO()
        with redirect_stdout(out):
            func(*args)
        return out.getvalue()

    def test_formatted_decimal(self):
        self.assertEqual(formatted_decimal(None), "--")
        self.assertEqual(formatted_decimal(87.0), "87.00")
        self.assertEqual(formatted_decimal(5.45454545), "5.45")

    def test_null_literacy_renders_placeholder(self):
        output = self.capture(display_countries, [Country("AUS", "Australia", 83.0, None)])
        row = [line for line in output.splitlines() if line.startswith("AUS")][0]
        self.assertTrue(row.rstrip().endswith("--"))
        self.assertNotIn("0.00", row)
        self.assertIn("83.00", row)

    def test_table_header(self):
        output = self.capture(display_countries, [])
        self.assertIn("COUNTRIES DATA", output)
        self.assertIn("Internet Users", output)
        self.assertIn("-" * 87, output)

    def test_statistics_lines(self):
        output = self.capture(display_statistics, compute_statistics([USA, AFG]))
        self.assertIn("Average Internet users : 49.00", output)
        self.assertIn("Maximum internet users : 87.00 (United States)", output)
        self.assertIn("Minimum internet users : 11.00 (Afghanistan)", output)
        self.assertIn("Maximum Literacy rate : 99.00 (United States)", output)
        self.assertIn("Minimum Literacy rate : 43.00 (Afghanistan)", output)

    def test_statistics_without_data(self):
        output = self.capture(display_statistics, compute_statistics([]))
        self.assertIn("Average Internet users : 0.00", output)
        self.assertIn("Maximum internet users : no data", output)
        self.assertIn("Minimum Literacy rate : no data", output)


class CountryManagerTestCase(DatabaseTestCase):

    def test_quit(self):
        output = self.run_menu("quit")
        self.assertIn("See you later alligator", output)

    def test_unknown_choice(self):
        output = self.run_menu("dance", "QUIT")
        self.assertIn("Unknown choice: 'dance'. Try again.", output)
        self.assertEqual(output.count("Welcome. Your menu options are:"), 2)

    def test_view(self):
        self.db.create(USA)
        output = self.run_menu("view", "quit")
        self.assertIn("United States", output)

    def test_statistics(self):
        self.db.create(USA)
        self.db.create(AFG)
        output = self.run_menu("statistics", "quit")
        self.assertIn("Average Internet users : 49.00", output)

    def test_add(self):
        print("\n[Test] Checking add from the menu...")
        output = self.run_menu("add", " usa ", "United States", "87", "99", "quit")
        self.assertIn("Country added successfully!", output)
        self.assertEqual(self.db.fetch_by_code("USA"), USA)

    def test_add_with_blank_metric(self):
        self.run_menu("add", "AUS", "Australia", "83", "", "quit")
        self.assertEqual(self.db.fetch_by_code("AUS"), Country("AUS", "Australia", 83.0, None))

    def test_add_wrong_length_code(self):
        output = self.run_menu("add", "US", "quit")
        self.assertIn("Invalid code. It has to be 3 characters long.", output)
        self.assertEqual(self.db.fetch_all(), [])

    def test_add_existing_code(self):
        self.db.create(USA)
        output = self.run_menu("add", "USA", "quit")
        self.assertIn("already exists", output)
        self.assertEqual(self.db.fetch_by_code("USA"), USA)

    def test_add_store_rejection_is_reported(self):
        with patch.object(self.db, 'create', side_effect=sqlite3.IntegrityError("UNIQUE constraint failed")):
            output = self.run_menu("add", "NEW", "Newland", "1", "2", "quit")
        self.assertIn("Could not add country 'NEW'", output)
        self.assertNotIn("Country added successfully!", output)

    def test_add_non_numeric_value_is_fatal(self):
        with self.assertRaises(ValueError):
            self.run_menu("add", "NEW", "Newland", "lots", "quit")
        self.assertIsNone(self.db.fetch_by_code("NEW"))

    def test_edit(self):
        self.db.create(USA)
        output = self.run_menu("edit", "usa", "America", "90", "98.5", "quit")
        self.assertIn("Country update complete!", output)
        self.assertEqual(self.db.fetch_by_code("USA"), Country("USA", "America", 90.0, 98.5))

    def test_edit_with_current_values_changes_nothing(self):
        self.db.create(USA)
        self.run_menu("edit", "USA", "United States", "87.0", "99.0", "quit")
        self.assertEqual(self.db.fetch_by_code("USA"), USA)

    def test_edit_shows_placeholder_for_missing_metric(self):
        self.db.create(Country("AUS", "Australia", 83.0, None))
        output = self.run_menu("edit", "AUS", "Australia", "83", "", "quit")
        self.assertIn("Literacy Rate: --", output)

    def test_edit_missing_code(self):
        self.db.create(USA)
        with patch.object(self.db, 'update') as update:
            output = self.run_menu("edit", "XXX", "quit")
        self.assertIn("No country found with code 'XXX'.", output)
        update.assert_not_called()

    def test_delete(self):
        self.db.create(USA)
        self.db.create(AFG)
        output = self.run_menu("delete", "afg", "quit")
        self.assertIn("Country deleted successfully!", output)
        self.assertEqual(self.db.fetch_all(), [USA])

    def test_delete_missing_code(self):
        self.db.create(USA)
        with patch.object(self.db, 'delete') as delete:
            output = self.run_menu("delete", "XXX", "quit")
        self.assertIn("No country found with code 'XXX'.", output)
        delete.assert_not_called()
        self.assertEqual(self.db.fetch_all(), [USA])

    def test_input_error_is_reported_and_loop_continues(self):
        output = self.run_menu(OSError("console gone"), "quit")
        self.assertIn("Problem with input", output)
        self.assertIn("See you later alligator", output)

    def test_end_of_input_stops_loop(self):
        output = self.run_menu("view", EOFError())
        self.assertIn("COUNTRIES DATA", output)
        self.assertNotIn("See you later alligator", output)


class ApiTestCase(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        init_db(self.db_path)
        app.testing = True
        self.app = app.test_client()  # Create a fake browser for testing the API

    def test_api_home(self):
        """Check if Homepage returns 200 OK."""
        print("[Test] Checking API Home...")
        response = self.app.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Welcome", response.data)

    def test_api_get_countries(self):
        self.db.create(USA)
        response = self.app.get('/api/countries')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json, [USA.to_dict()])

    def test_api_country_lookup(self):
        self.db.create(AFG)
        response = self.app.get('/api/country/afg')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json['name'], "Afghanistan")
        self.assertEqual(response.json['adultLiteracyRate'], 43.0)

    def test_api_404(self):
        """Check if invalid country returns 404 JSON (not HTML)."""
        response = self.app.get('/api/country/ZZZ')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json['error'], "Country not found")

    def test_api_unknown_route(self):
        response = self.app.get('/api/nowhere')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json['status'], 404)

    def test_api_statistics(self):
        self.db.create(USA)
        self.db.create(AFG)
        data = self.app.get('/api/statistics').json
        self.assertEqual(data['total_countries'], 2)
        self.assertEqual(data['average_internet_users'], 49.0)
        self.assertEqual(data['max_internet_users'], {"code": "USA", "name": "United States", "value": 87.0})
        self.assertEqual(data['min_literacy_rate']['code'], "AFG")

    def test_api_statistics_empty(self):
        data = self.app.get('/api/statistics').json
        self.assertEqual(data['average_literacy_rate'], 0.0)
        self.assertIsNone(data['max_literacy_rate'])

    def test_api_on_fresh_database_file(self):
        """The API creates the table when started on a new file."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            init_db(os.path.join(tmp_dir, "fresh.db"))
            response = self.app.get('/api/countries')
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json, [])

    def test_api_refuses_unreachable_store(self):
        missing_dir = os.path.join(tempfile.gettempdir(), "no_such_dir_for_countries")
        with self.assertRaises(StoreInitError):
            init_db(os.path.join(missing_dir, "countries.db"))


class ConfigTestCase(unittest.TestCase):

    def test_known_log_levels(self):
        self.assertEqual(config.resolve_log_level("debug"), "DEBUG")
        self.assertEqual(config.resolve_log_level(" Warning "), "WARNING")

    def test_unknown_log_level_falls_back_to_info(self):
        self.assertEqual(config.resolve_log_level("verbose"), "INFO")
        self.assertEqual(config.resolve_log_level(""), "INFO")
        self.assertEqual(config.resolve_log_level(None), "INFO")

    def test_setup_logging_with_unknown_level(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            logger = logging.getLogger("countrymgr.tests.level")
            config.setup_logging(logger, os.path.join(tmp_dir, "test.log"), level="verbose")
            try:
                self.assertEqual(logger.level, logging.INFO)
            finally:
                for handler in list(logger.handlers):
                    handler.close()
                    logger.removeHandler(handler)


class ValidatorTestCase(DatabaseTestCase):

    def test_reports_bad_codes_and_missing_data(self):
        self.db.create(USA)
        self.db.create(Country("AUS", "Australia", 83.0, None))
        with self.db.session() as conn:
            conn.execute("INSERT INTO country (code, name) VALUES ('abc', 'Lowercase')")

        with redirect_stdout(io.StringIO()):
            bad_codes, missing = DataValidator(self.db).run_all_checks()

        self.assertEqual([c.code for c in bad_codes], ["abc"])
        self.assertEqual(sorted(c.code for c in missing), ["AUS", "abc"])

    def test_clean_table_passes(self):
        self.db.create(USA)
        out = io.StringIO()
        with redirect_stdout(out):
            bad_codes, missing = DataValidator(self.db).run_all_checks()
        self.assertEqual((bad_codes, missing), ([], []))
        self.assertIn("Passed: All country codes are well formed.", out.getvalue())


if __name__ == '__main__':
    unittest.main()
