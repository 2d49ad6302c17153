from .client import GitHubClient
from .content import ContentSerializer, is_binary_file
from .exceptions import FormatError, IngestError, RemoteFetchError
from .extractor import NO_FILES_FOUND, extract_files
from .ingester import GitIngester, IngestResult
from .models import ContentBlob, DirectoryEntry, EntryType, FileSection, RepositoryHandle, RepositoryMetadata
from .summary import build_summary
from .tree import TreeBuilder

__all__ = [
    "GitHubClient",
    "ContentSerializer",
    "is_binary_file",
    "FormatError",
    "IngestError",
    "RemoteFetchError",
    "NO_FILES_FOUND",
    "extract_files",
    "GitIngester",
    "IngestResult",
    "ContentBlob",
    "DirectoryEntry",
    "EntryType",
    "FileSection",
    "RepositoryHandle",
    "RepositoryMetadata",
    "build_summary",
    "TreeBuilder",
]
