import base64
from typing import Dict, List, Optional

import pytest

from ingest import DirectoryEntry, EntryType, RemoteFetchError, RepositoryHandle, RepositoryMetadata


def file_entry(path: str, size: int = 10) -> DirectoryEntry:
    return DirectoryEntry(name=path.rsplit("/", 1)[-1], type=EntryType.FILE, path=path, size=size)


def dir_entry(path: str) -> DirectoryEntry:
    return DirectoryEntry(name=path.rsplit("/", 1)[-1], type=EntryType.DIRECTORY, path=path)


class FakeRepositoryClient:
    """In-memory repository keyed by directory path and file path."""

    def __init__(
        self,
        listings: Dict[str, List[DirectoryEntry]],
        files: Optional[Dict[str, str]] = None,
        metadata: Optional[RepositoryMetadata] = None,
        failing_paths: Optional[set] = None,
    ):
        self.listings = listings
        self.files = files or {}
        self.metadata = metadata or RepositoryMetadata(default_branch="main")
        self.failing_paths = failing_paths or set()
        self.fail_repository = False
        self.listed: List[tuple] = []
        self.fetched: List[tuple] = []

    def get_repository(self, owner: str, repo: str) -> RepositoryMetadata:
        if self.fail_repository:
            raise RemoteFetchError("Not Found")
        return self.metadata

    def list_directory(self, owner: str, repo: str, path: str = "", ref: Optional[str] = None) -> List[DirectoryEntry]:
        self.listed.append((path, ref))
        if path in self.failing_paths or path not in self.listings:
            raise RemoteFetchError(f"cannot list {path}")
        return self.listings[path]

    def get_file_content(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> str:
        self.fetched.append((path, ref))
        if path in self.failing_paths or path not in self.files:
            raise RemoteFetchError("Not Found")
        return base64.b64encode(self.files[path].encode("utf-8")).decode("ascii")


@pytest.fixture
def handle() -> RepositoryHandle:
    return RepositoryHandle.from_url("https://github.com/octo/demo")


@pytest.fixture
def sample_client() -> FakeRepositoryClient:
    """Root with ``src/`` and ``README.md``; ``src`` holds ``index.js``."""
    return FakeRepositoryClient(
        listings={
            "": [dir_entry("src"), file_entry("README.md", size=120)],
            "src": [file_entry("src/index.js", size=45)],
        },
        files={
            "README.md": "# Demo\n\nA demo repository.\n",
            "src/index.js": "console.log('hello');\n",
        },
        metadata=RepositoryMetadata(
            description="A demo repository",
            stars=42,
            forks=7,
            language="JavaScript",
            created_at="2023-01-15T10:00:00Z",
            updated_at="2024-03-02T08:30:00Z",
            default_branch="main",
        ),
    )
