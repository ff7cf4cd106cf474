class WordServiceError(Exception):
    """Base class for every error raised by the word service."""


class ConfigError(WordServiceError):
    """Service binding or credentials are missing or malformed."""


class SchemaBootstrapError(WordServiceError):
    """Keyspace/table could not be created, or the cluster was unreachable."""


class StorageError(WordServiceError):
    """An insert or select failed while serving a request."""
