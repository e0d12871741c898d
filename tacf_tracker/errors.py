"""
Error types raised by the mention classification engine.

Every error is a caller-recoverable validation failure. The engine never
retries and never logs; it raises one of these and lets the caller decide
whether "no mention" is an acceptable partial result.
"""


class MentionError(ValueError):
    """Base class for all classification failures."""


class InvalidDateRange(MentionError):
    """Reference (test) date precedes the birth date."""

    def __init__(self, birth_date, as_of_date):
        self.birth_date = birth_date
        self.as_of_date = as_of_date
        super().__init__(
            f"Reference date {as_of_date} is before birth date {birth_date}"
        )


class InvalidAge(MentionError):
    """A negative age reached the bracket resolver."""

    def __init__(self, age):
        self.age = age
        super().__init__(f"Age must be a non-negative integer, got {age!r}")


class UnknownCombination(MentionError):
    """No threshold row exists for an (exercise, sex, bracket) triple.

    Signals an incomplete table, i.e. a programming error.
    """

    def __init__(self, exercise, sex, bracket):
        self.exercise = exercise
        self.sex = sex
        self.bracket = bracket
        super().__init__(
            f"No thresholds for exercise={exercise!s}, sex={sex!s}, bracket={bracket!s}"
        )


class MissingScore(MentionError):
    """The exercise was not administered (score is absent)."""

    def __init__(self, exercise):
        self.exercise = exercise
        super().__init__(f"No score recorded for {exercise!s}")


class InvalidScore(MentionError):
    """The score is negative, not a number, or not numeric at all."""

    def __init__(self, exercise, raw_score):
        self.exercise = exercise
        self.raw_score = raw_score
        super().__init__(f"Invalid score for {exercise!s}: {raw_score!r}")
