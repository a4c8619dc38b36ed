class Country:
    """A single row of the country table."""

    def __init__(self, code, name, internet_users=None, adult_literacy_rate=None):
        self.code = code
        self.name = name
        self.internet_users = internet_users
        self.adult_literacy_rate = adult_literacy_rate

    @classmethod
    def from_row(cls, row):
        return cls(
            row['code'],
            row['name'],
            row['internetUsers'],
            row['adultLiteracyRate']
        )

    def to_dict(self):
        return {
            "code": self.code,
            "name": self.name,
            "internetUsers": self.internet_users,
            "adultLiteracyRate": self.adult_literacy_rate
        }

    def __eq__(self, other):
        if not isinstance(other, Country):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Country(code={self.code!r}, name={self.name!r}, "
                f"internet_users={self.internet_users!r}, "
                f"adult_literacy_rate={self.adult_literacy_rate!r})")
