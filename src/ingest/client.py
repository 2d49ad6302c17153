import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from ingest.exceptions import RemoteFetchError
from ingest.models import DirectoryEntry, EntryType, RepositoryMetadata
from ingest.repository_protocol import RepositoryClientProtocol

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class GitHubClient(RepositoryClientProtocol):
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "gitingest-mcp",
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def get_repository(self, owner: str, repo: str) -> RepositoryMetadata:
        data = self._get(f"/repos/{owner}/{repo}")
        if not isinstance(data, dict):
            raise RemoteFetchError(f"Unexpected response for repository {owner}/{repo}")

        return RepositoryMetadata(
            description=data.get("description"),
            stars=data.get("stargazers_count") or 0,
            forks=data.get("forks_count") or 0,
            language=data.get("language"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            default_branch=data.get("default_branch"),
        )

    def list_directory(self, owner: str, repo: str, path: str = "", ref: Optional[str] = None) -> List[DirectoryEntry]:
        data = self._get(self._contents_endpoint(owner, repo, path), ref)
        if not isinstance(data, list):
            raise RemoteFetchError(f"Path '{path}' is not a directory")

        entries = []
        for item in data:
            if not isinstance(item, dict) or not item.get("name"):
                raise RemoteFetchError(f"Malformed entry in listing of '{path}': {item!r}")
            try:
                entry_type = EntryType(item.get("type", "file"))
            except ValueError:
                entry_type = EntryType.FILE
            entries.append(
                DirectoryEntry(
                    name=item["name"],
                    type=entry_type,
                    path=item.get("path") or (f"{path}/{item['name']}" if path else item["name"]),
                    size=item.get("size") or 0,
                )
            )
        return entries

    def get_file_content(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> str:
        data = self._get(self._contents_endpoint(owner, repo, path), ref)
        if not isinstance(data, dict) or data.get("type") != "file":
            raise RemoteFetchError(f"Path '{path}' is not a file")

        encoding = data.get("encoding")
        if encoding != "base64":
            raise RemoteFetchError(f"Unsupported content encoding for '{path}': {encoding}")
        return data.get("content") or ""

    @staticmethod
    def _contents_endpoint(owner: str, repo: str, path: str) -> str:
        endpoint = f"/repos/{owner}/{repo}/contents"
        if path:
            endpoint += "/" + quote(path.strip("/"))
        return endpoint

    def _get(self, endpoint: str, ref: Optional[str] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        params: Dict[str, str] = {"ref": ref} if ref else {}

        logger.debug(f"GET {url} {params}")
        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise RemoteFetchError(f"Network error fetching {url}: {exc}") from exc

        if response.status_code != 200:
            raise RemoteFetchError(self._describe_failure(response, url))

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteFetchError(f"Invalid JSON returned for {url}") from exc

    @staticmethod
    def _describe_failure(response: requests.Response, url: str) -> str:
        if response.status_code == 404:
            return "Not Found"

        if response.status_code in (403, 429) and response.headers.get("x-ratelimit-remaining") == "0":
            reset_raw = response.headers.get("x-ratelimit-reset", "")
            try:
                reset = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
            except (ValueError, OSError):
                reset = reset_raw or "unknown"
            return f"API rate limit exceeded, resets at {reset}. Set GITHUB_TOKEN to raise the limit"

        return f"Request failed with status code: {response.status_code}. Response: {response.text[:200]}"
