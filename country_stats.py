from collections import namedtuple

CountryStatistics = namedtuple('CountryStatistics', [
    'max_internet_users',
    'min_internet_users',
    'max_literacy_rate',
    'min_literacy_rate',
    'average_internet_users',
    'average_literacy_rate',
])


def _field_summary(countries, field):
    """Max holder, min holder and mean of one nullable field."""
    present = [c for c in countries if getattr(c, field) is not None]
    if not present:
        return None, None, 0.0

    # max()/min() keep the first element on ties
    key = lambda c: getattr(c, field)
    average = sum(key(c) for c in present) / len(present)
    return max(present, key=key), min(present, key=key), average


def compute_statistics(countries):
    max_users, min_users, avg_users = _field_summary(countries, 'internet_users')
    max_literacy, min_literacy, avg_literacy = _field_summary(countries, 'adult_literacy_rate')
    return CountryStatistics(
        max_users,
        min_users,
        max_literacy,
        min_literacy,
        avg_users,
        avg_literacy
    )
