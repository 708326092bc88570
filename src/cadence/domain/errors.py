"""Host-layer errors. The scheduling engine itself never raises."""


class CadenceError(Exception):
    """Base class for errors surfaced to the user."""


class ProblemNotFoundError(CadenceError):
    def __init__(self, url: str):
        super().__init__(f"No problem stored for {url}")
        self.url = url


class AttemptIndexError(CadenceError):
    def __init__(self, index: int, count: int):
        super().__init__(f"Attempt #{index} does not exist (problem has {count} attempts)")
        self.index = index
        self.count = count


class StoreError(CadenceError):
    """The problem store could not be read or written."""


class ConfigError(CadenceError):
    """Configuration from the environment, config file or CLI is invalid."""
