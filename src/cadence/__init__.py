"""cadence: spaced-repetition scheduling for practice problems."""

from cadence.consts import VERSION

__version__ = VERSION
