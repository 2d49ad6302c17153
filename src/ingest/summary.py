from datetime import datetime
from typing import Optional

from ingest.models import RepositoryHandle, RepositoryMetadata


def format_date(timestamp: Optional[str]) -> str:
    """Render an ISO 8601 timestamp as an en-US short date (``1/15/2023``)."""
    if not timestamp:
        return "Unknown"
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return "Unknown"
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def build_summary(handle: RepositoryHandle, metadata: RepositoryMetadata) -> str:
    lines = [
        f"Repository: {handle.full_name}",
        f"Description: {metadata.description or 'No description provided'}",
        f"Language: {metadata.language or 'Not specified'}",
        f"Stars: {metadata.stars}",
        f"Forks: {metadata.forks}",
        f"Created: {format_date(metadata.created_at)}",
        f"Last updated: {format_date(metadata.updated_at)}",
    ]
    return "\n".join(lines)
