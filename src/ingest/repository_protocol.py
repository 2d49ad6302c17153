from typing import List, Optional, Protocol, runtime_checkable

from ingest.models import DirectoryEntry, RepositoryMetadata


@runtime_checkable
class RepositoryClientProtocol(Protocol):
    """Protocol defining the remote calls the collector relies on.

    Any class that implements these methods will satisfy the protocol.
    """

    def get_repository(self, owner: str, repo: str) -> RepositoryMetadata:
        """Fetch repository metadata.

        Raises:
            RemoteFetchError: If the repository cannot be fetched
        """
        ...

    def list_directory(self, owner: str, repo: str, path: str = "", ref: Optional[str] = None) -> List[DirectoryEntry]:
        """List the entries of one directory.

        Args:
            owner: Account owning the repository
            repo: Repository name
            path: Directory path relative to the repository root, empty for the root
            ref: Git reference (branch, tag, or commit SHA); the default branch when omitted

        Returns:
            Entries of the directory in the order the service returns them

        Raises:
            RemoteFetchError: If the listing cannot be fetched
        """
        ...

    def get_file_content(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> str:
        """Fetch a file body as a base64 encoded string.

        Raises:
            RemoteFetchError: If the file cannot be fetched
        """
        ...
