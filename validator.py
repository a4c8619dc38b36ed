import config
from database_manager import DatabaseManager


class DataValidator:
    def __init__(self, db):
        self.db = db

    def run_all_checks(self):
        countries = self.db.fetch_all()
        bad_codes = self.check_codes(countries)
        missing = self.check_integrity(countries)
        self.report_general_stats(countries)
        return bad_codes, missing

    def check_codes(self, countries):
        """Codes must be 3 uppercase characters."""
        print("\n[1] Code check (3 uppercase characters)...")

        bad = [c for c in countries if len(c.code) != 3 or c.code != c.code.upper()]
        if not bad:
            print("Passed: All country codes are well formed.")
        else:
            print(f"Fail: Found {len(bad)} malformed codes:")
            for country in bad:
                print(f"   - {country.code!r} ({country.name})")
        return bad

    def check_integrity(self, countries):
        """Lists countries missing either metric."""
        print("\n[2] Integrity check (Searching for null data)...")

        missing = [c for c in countries
                   if c.internet_users is None or c.adult_literacy_rate is None]
        if not missing:
            print("Passed: All countries have Internet Users and Literacy Rate data.")
        else:
            print(f"Found {len(missing)} countries with missing data:")
            for country in missing:
                print(f"   - {country.name}")
        return missing

    def report_general_stats(self, countries):
        print("\n[3] General stats")

        users = [c.internet_users for c in countries if c.internet_users is not None]
        literacy = [c.adult_literacy_rate for c in countries if c.adult_literacy_rate is not None]

        print(f"   - Total Countries: {len(countries)}")
        print(f"   - With Internet Users data: {len(users)}")
        print(f"   - With Literacy Rate data: {len(literacy)}")


if __name__ == "__main__":
    validator = DataValidator(DatabaseManager(config.DATABASE).connect())
    validator.run_all_checks()
