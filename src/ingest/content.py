import base64
import logging
import os
from typing import List, Optional

from ingest.exceptions import RemoteFetchError
from ingest.models import ContentBlob, DirectoryEntry, EntryType, FileSection, RepositoryHandle, SectionKind
from ingest.repository_protocol import RepositoryClientProtocol

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 1_000_000

BINARY_EXTENSIONS = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp",
        ".mp3", ".mp4", ".wav", ".ogg", ".avi", ".mov", ".flv",
        ".zip", ".tar", ".gz", ".rar", ".7z",
        ".exe", ".dll", ".so", ".dylib",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    }
)


def is_binary_file(filename: str) -> bool:
    extension = os.path.splitext(filename)[1].lower()
    return extension in BINARY_EXTENSIONS


def decode_body(encoded: str) -> str:
    """Decode a base64 file body to text, replacing invalid UTF-8 sequences."""
    return base64.b64decode(encoded).decode("utf-8", errors="replace")


class ContentSerializer:
    """Collects file bodies of a repository into a single delimited blob.

    Entries are visited depth-first in the order the listing gives them. Files
    that look binary or exceed ``MAX_FILE_SIZE`` get a placeholder instead of a
    body, a failed file fetch gets an error placeholder, and a subdirectory whose
    listing fails is left out without a trace.
    """

    def __init__(self, client: RepositoryClientProtocol, handle: RepositoryHandle, ref: Optional[str] = None):
        self.client = client
        self.handle = handle
        self.ref = ref

    def build_content(self, entries: List[DirectoryEntry], path: str = "") -> ContentBlob:
        sections: List[FileSection] = []

        for entry in entries:
            entry_path = f"{path}/{entry.name}" if path else entry.name

            if entry.type is EntryType.FILE:
                sections.append(self._file_section(entry, entry_path))
            elif entry.is_directory:
                try:
                    children = self.client.list_directory(self.handle.owner, self.handle.repo, entry_path, self.ref)
                except RemoteFetchError as exc:
                    logger.warning(f"Skipping directory {entry_path} of {self.handle.full_name}: {exc}")
                    continue
                sections.extend(self.build_content(children, entry_path).sections)

        return ContentBlob(tuple(sections))

    def _file_section(self, entry: DirectoryEntry, entry_path: str) -> FileSection:
        if is_binary_file(entry.name) or entry.size > MAX_FILE_SIZE:
            return FileSection(
                path=entry_path,
                body=f"[Binary or large file: {entry.size} bytes]",
                size=entry.size,
                kind=SectionKind.BINARY,
            )

        try:
            encoded = self.client.get_file_content(self.handle.owner, self.handle.repo, entry_path, self.ref)
            body = decode_body(encoded)
        except (RemoteFetchError, ValueError) as exc:
            logger.warning(f"Could not load {self.handle.full_name}/{entry_path}: {exc}")
            return FileSection(
                path=entry_path,
                body=f"[Error loading file: {exc}]",
                size=entry.size,
                kind=SectionKind.ERROR,
            )

        return FileSection(path=entry_path, body=body, size=entry.size)
