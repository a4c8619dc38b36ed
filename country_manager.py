import logging
import sqlite3

import config
from country import Country
from country_stats import compute_statistics
from database_manager import DatabaseManager
from display import display_countries, display_country, display_statistics

logger = logging.getLogger(__name__)

MENU_OPTIONS = {
    "view": "View Countries data.",
    "statistics": "View Internet users and literacy rate's statistics.",
    "edit": "Edit country's information.",
    "add": "Add a new country.",
    "delete": "Delete a country.",
    "quit": "Exit the program",
}


def read_line(prompt):
    print(prompt)
    return input().strip()


def read_decimal(prompt):
    """Blank means no value; anything else must parse as a float."""
    text = read_line(prompt)
    if text == "":
        return None
    return float(text)


class CountryManager:
    """Console menu over a DatabaseManager."""

    def __init__(self, db):
        self.db = db
        self.handlers = {
            "view": self.view_countries,
            "statistics": self.view_statistics,
            "edit": self.edit_country,
            "add": self.add_country,
            "delete": self.delete_country,
        }

    def prompt_action(self):
        print("\nWelcome. Your menu options are: \n")
        for option, description in MENU_OPTIONS.items():
            print("%-10s - %s " % (option, description))

        print("\n\nWhat would you like to do:  ")
        return input().strip().lower()

    def view_countries(self):
        display_countries(self.db.fetch_all())

    def view_statistics(self):
        display_statistics(compute_statistics(self.db.fetch_all()))

    def country_code(self, action):
        self.view_countries()
        return read_line(f"Introduce the country code of the country you want to {action}: ").upper()

    def edit_country(self):
        code = self.country_code("edit")
        country = self.db.fetch_by_code(code)
        if country is None:
            print(f"No country found with code '{code}'.")
            return

        display_country(country)
        print("\n\nUpdating...\n")
        country.name = read_line("Introduce the new country name: ")
        country.internet_users = read_decimal("Introduce the amount of Internet Users: ")
        country.adult_literacy_rate = read_decimal("Introduce the amount of literacy rate of the country: ")

        self.db.update(country)
        print("Country update complete!")

    def add_country(self):
        code = read_line("Introduce the new country code: ").upper()
        if len(code) != 3:
            print("Invalid code. It has to be 3 characters long.")
            return
        if self.db.fetch_by_code(code) is not None:
            print(f"A country with code '{code}' already exists.")
            return

        name = read_line("Introduce the new country name: ")
        internet_users = read_decimal("Introduce the amount of Internet Users: ")
        literacy_rate = read_decimal("Introduce the amount of literacy rate of the country: ")

        try:
            self.db.create(Country(code, name, internet_users, literacy_rate))
        except sqlite3.IntegrityError as e:
            logger.error(f"Could not add {code}: {e}")
            print(f"Could not add country '{code}': {e}")
            return
        print("Country added successfully!")

    def delete_country(self):
        code = self.country_code("delete")
        country = self.db.fetch_by_code(code)
        if country is None:
            print(f"No country found with code '{code}'.")
            return

        print("\n\nDeleting...\n")
        self.db.delete(country)
        print("Country deleted successfully!")

    def run(self):
        choice = ""
        while choice != "quit":
            try:
                choice = self.prompt_action()
                if choice == "quit":
                    print("See you later alligator :)")
                elif choice in self.handlers:
                    self.handlers[choice]()
                else:
                    print(f"Unknown choice: '{choice}'. Try again.  \n\n")
            except EOFError:
                logger.info("End of input, leaving the menu loop")
                break
            except OSError:
                logger.exception("Problem with input")
                print("Problem with input")


def main():
    config.setup_logging(logging.getLogger())
    db = DatabaseManager(config.DATABASE).connect()
    CountryManager(db).run()


if __name__ == "__main__":
    main()
