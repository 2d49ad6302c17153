import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ingest.content import ContentSerializer
from ingest.exceptions import RemoteFetchError
from ingest.extractor import extract_sections
from ingest.models import ContentBlob, RepositoryHandle, RepositoryMetadata
from ingest.repository_protocol import RepositoryClientProtocol
from ingest.summary import build_summary
from ingest.tree import TreeBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    """Everything collected from a repository in one fetch cycle."""

    handle: RepositoryHandle
    metadata: RepositoryMetadata
    summary: str
    tree: str
    content: ContentBlob = field(default_factory=ContentBlob)

    def get_summary(self) -> str:
        return self.summary or "Summary not available"

    def get_tree(self) -> str:
        return self.tree or "Tree structure not available"

    def get_content(self, file_paths: Optional[Iterable[str]] = None) -> str:
        """Return the whole content blob, or only the files named in ``file_paths``."""
        if not self.content.sections:
            return "Content not available"
        if file_paths is None:
            return self.content.text
        return extract_sections(self.content.sections, file_paths)


class GitIngester:
    def __init__(self, client: RepositoryClientProtocol):
        self.client = client

    def fetch_all(self, handle: RepositoryHandle) -> IngestResult:
        """Fetch metadata, tree and file contents of a repository.

        Args:
            handle: Repository to ingest; its branch overrides the default branch

        Returns:
            IngestResult: Summary, tree text and content blob

        Raises:
            RemoteFetchError: If the repository metadata or the root listing cannot be fetched
        """
        logger.info(f"Ingesting {handle.url}")
        try:
            metadata = self.client.get_repository(handle.owner, handle.repo)
            ref = handle.branch or metadata.default_branch
            root_entries = self.client.list_directory(handle.owner, handle.repo, "", ref)
        except RemoteFetchError as exc:
            logger.error(f"Error fetching repository data for {handle.full_name}: {exc}")
            raise RemoteFetchError(f"Failed to fetch repository data: {exc}") from exc

        tree = TreeBuilder(self.client, handle, ref).build_tree(root_entries)
        content = ContentSerializer(self.client, handle, ref).build_content(root_entries)
        logger.info(f"Collected {len(content.sections)} files from {handle.full_name}")

        return IngestResult(
            handle=handle,
            metadata=metadata,
            summary=build_summary(handle, metadata),
            tree=tree,
            content=content,
        )
