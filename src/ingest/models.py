import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ingest.exceptions import FormatError

DELIMITER = "=" * 50

_REPOSITORY_URL_RE = re.compile(
    r"^https?://(?P<host>[^/\s]+)/(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?(?:/.*)?$"
)


def render_header(path: str) -> str:
    return f"{DELIMITER}\nFile: {path}\n{DELIMITER}\n"


@dataclass(frozen=True)
class RepositoryHandle:
    host: str
    owner: str
    repo: str
    branch: Optional[str] = None

    @classmethod
    def from_url(cls, url: str, branch: Optional[str] = None) -> "RepositoryHandle":
        """Parse a repository URL such as ``https://github.com/owner/repo``.

        Raises:
            FormatError: If the URL has no owner or repository segment
        """
        match = _REPOSITORY_URL_RE.match(url.strip())
        if not match:
            raise FormatError(f"Invalid repository URL format: '{url}'")
        return cls(host=match["host"], owner=match["owner"], repo=match["repo"], branch=branch or None)

    @classmethod
    def from_parts(cls, owner: str, repo: str, branch: Optional[str] = None, host: str = "github.com") -> "RepositoryHandle":
        """Build a handle from separate owner and repository names.

        Raises:
            FormatError: If either name is empty or contains a path separator
        """
        for label, value in (("owner", owner), ("repository", repo)):
            if not value or "/" in value or value.strip() != value:
                raise FormatError(f"Invalid {label} name: '{value}'")
        return cls.from_url(f"https://{host}/{owner}/{repo}", branch)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def url(self) -> str:
        base = f"https://{self.host}/{self.owner}/{self.repo}"
        if self.branch:
            return f"{base}/tree/{self.branch}"
        return base


@dataclass(frozen=True)
class RepositoryMetadata:
    description: Optional[str] = None
    stars: int = 0
    forks: int = 0
    language: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    default_branch: Optional[str] = None


class EntryType(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"
    SYMLINK = "symlink"
    SUBMODULE = "submodule"


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    type: EntryType
    path: str
    size: int = 0

    @property
    def is_directory(self) -> bool:
        return self.type is EntryType.DIRECTORY


class SectionKind(str, Enum):
    TEXT = "text"
    BINARY = "binary"
    ERROR = "error"


@dataclass(frozen=True)
class FileSection:
    """One delimited file region of a content blob."""

    path: str
    body: str
    size: int = 0
    kind: SectionKind = SectionKind.TEXT

    def render(self) -> str:
        return f"{render_header(self.path)}{self.body}\n\n"


@dataclass(frozen=True)
class ContentBlob:
    """Ordered file sections together with their flat text rendering."""

    sections: Tuple[FileSection, ...] = ()

    @property
    def text(self) -> str:
        return "".join(section.render() for section in self.sections)

    def find(self, path: str) -> Optional[FileSection]:
        """Return the section recorded under exactly ``path``, if any."""
        for section in self.sections:
            if section.path == path:
                return section
        return None
