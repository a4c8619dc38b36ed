RULE = "-" * 87
STATS_RULE = "-" * 68
ROW_FORMAT = "%-5s %30s %25s %20s"


def formatted_decimal(value):
    """Two decimals, or '--' when there is no value."""
    if value is None:
        return "--"
    return "%.2f" % value


def display_countries(countries):
    print()
    print("COUNTRIES DATA")
    print(RULE)
    print(ROW_FORMAT % ("Code", "Name", "Internet Users", "Literacy Rate"))
    print(RULE)

    for country in countries:
        print(ROW_FORMAT % (
            country.code,
            country.name,
            formatted_decimal(country.internet_users),
            formatted_decimal(country.adult_literacy_rate)
        ))


def display_country(country):
    print("Current country data: ")
    print(f"\nName: {country.name} ")
    print(f"\nInternet Users: {formatted_decimal(country.internet_users)} ")
    print(f"\nLiteracy Rate: {formatted_decimal(country.adult_literacy_rate)} ")


def _holder(country, field):
    if country is None:
        return "no data"
    return f"{getattr(country, field):.2f} ({country.name})"


def display_statistics(stats):
    print("\n Statistics:")
    print(STATS_RULE)
    print(f"Average Internet users : {stats.average_internet_users:.2f}  ")
    print(f"Maximum internet users : {_holder(stats.max_internet_users, 'internet_users')} ")
    print(f"Minimum internet users : {_holder(stats.min_internet_users, 'internet_users')} ")

    print(f"Average Literacy Rate : {stats.average_literacy_rate:.2f}  ")
    print(f"Maximum Literacy rate : {_holder(stats.max_literacy_rate, 'adult_literacy_rate')} ")
    print(f"Minimum Literacy rate : {_holder(stats.min_literacy_rate, 'adult_literacy_rate')} ")
