class ClinicError(Exception):
    """Base class for every error raised by the clinic package."""


class ConfigurationError(ClinicError):
    pass


class StorageError(ClinicError):
    pass


class DatabaseConnectionError(StorageError):
    """The database could not be reached at startup. Fatal for the run."""


class QueryError(StorageError):
    """A single statement was rejected; only the current operation is abandoned."""
