import logging
from typing import List, Optional

from ingest.exceptions import RemoteFetchError
from ingest.models import DirectoryEntry, RepositoryHandle
from ingest.repository_protocol import RepositoryClientProtocol

logger = logging.getLogger(__name__)

DIRECTORY_ERROR = "⚠️ Error loading directory contents"


def _indent_for(path: str) -> str:
    return "  " * len([segment for segment in path.split("/") if segment])


def sort_entries(entries: List[DirectoryEntry]) -> List[DirectoryEntry]:
    """Directories first, then files, each group ordered by name."""
    return sorted(entries, key=lambda entry: (not entry.is_directory, entry.name))


class TreeBuilder:
    def __init__(self, client: RepositoryClientProtocol, handle: RepositoryHandle, ref: Optional[str] = None):
        self.client = client
        self.handle = handle
        self.ref = ref

    def build_tree(self, entries: List[DirectoryEntry], path: str = "") -> str:
        """Render a directory level and everything below it.

        Args:
            entries: Listing of the directory at ``path``
            path: Directory path relative to the repository root, empty for the root

        Returns:
            str: One line per entry, indented two spaces per nesting level
        """
        indent = _indent_for(path)
        lines = []

        for entry in sort_entries(entries):
            entry_path = f"{path}/{entry.name}" if path else entry.name

            if not entry.is_directory:
                lines.append(f"{indent}📄 {entry.name}\n")
                continue

            lines.append(f"{indent}📁 {entry.name}/\n")
            try:
                children = self.client.list_directory(self.handle.owner, self.handle.repo, entry_path, self.ref)
            except RemoteFetchError as exc:
                logger.warning(f"Could not list {self.handle.full_name}/{entry_path}: {exc}")
                lines.append(f"{indent}  {DIRECTORY_ERROR}\n")
                continue

            lines.append(self.build_tree(children, entry_path))

        return "".join(lines)
