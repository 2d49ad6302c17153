class IngestError(Exception):
    """Base class for errors raised while ingesting a repository."""


class FormatError(IngestError, ValueError):
    """The repository URL could not be parsed into owner and repository."""


class RemoteFetchError(IngestError):
    """A call to the remote repository service failed."""
