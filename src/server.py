import asyncio
import logging
import os
import pathlib
import signal
from typing import Annotated, Any, List, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from core import PromptManager
from ingest import NO_FILES_FOUND, GitHubClient, GitIngester, IngestError, IngestResult, RepositoryHandle
from ingest.client import DEFAULT_API_URL
from ingest.models import render_header

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()


class ServerConfig:
    def __init__(self) -> None:
        self.transport = os.getenv("MCP_TRANSPORT", "stdio").lower()
        self.sse_port = int(os.getenv("MCP_SSE_PORT", "8000"))
        self.streamable_http_port = int(os.getenv("MCP_STREAMABLE_HTTP_PORT", "8080"))
        self.github_api_url = os.getenv("GITHUB_API_URL") or DEFAULT_API_URL
        self.github_token = os.getenv("GITHUB_TOKEN") or None
        self.github_timeout = float(os.getenv("GITHUB_TIMEOUT", "30"))


config = ServerConfig()

server = FastMCP(name="gitingest-mcp")

github_client = GitHubClient(
    base_url=config.github_api_url,
    token=config.github_token,
    timeout=config.github_timeout,
)

prompt_manager = PromptManager(file_path=pathlib.Path(__file__).parent / "core" / "prompts" / "prompts.yaml")

# Load prompts
GIT_SUMMARY_DESCRIPTION = prompt_manager._load_prompt("tools.git_summary")
GIT_TREE_DESCRIPTION = prompt_manager._load_prompt("tools.git_tree")
GIT_FILES_DESCRIPTION = prompt_manager._load_prompt("tools.git_files")

OwnerArg = Annotated[str, Field(description=prompt_manager._load_prompt("arguments.owner"))]
RepoArg = Annotated[str, Field(description=prompt_manager._load_prompt("arguments.repo"))]
BranchArg = Annotated[Optional[str], Field(description=prompt_manager._load_prompt("arguments.branch"))]
FilePathsArg = Annotated[List[str], Field(description=prompt_manager._load_prompt("arguments.file_paths"))]

SHUTDOWN_MESSAGE = "Server is shutting down"

_shutdown_requested = False


def signal_handler(sig: int, frame: Any) -> None:
    """Handle termination signals for graceful shutdown."""
    global _shutdown_requested
    logger.info(f"Received signal {sig}, initiating graceful shutdown...")
    _shutdown_requested = True


def _ingest(owner: str, repo: str, branch: Optional[str]) -> IngestResult:
    handle = RepositoryHandle.from_parts(owner, repo, branch)
    return GitIngester(github_client).fetch_all(handle)


def _failure(what: str, owner: str, repo: str, exc: Exception) -> ToolError:
    return ToolError(f"Failed to get {what}: {exc}. Try visiting https://github.com/{owner}/{repo} directly.")


def git_summary(owner: OwnerArg, repo: RepoArg, branch: BranchArg = None) -> str:
    if _shutdown_requested:
        logger.info("Shutdown in progress, declining new requests")
        return SHUTDOWN_MESSAGE

    try:
        result = _ingest(owner, repo, branch)
    except IngestError as exc:
        logger.warning(f"Error summarizing {owner}/{repo}: {exc}")
        raise _failure("repository summary", owner, repo, exc) from exc
    except Exception as exc:
        logger.error(f"Unexpected error summarizing {owner}/{repo}: {exc}")
        raise _failure("repository summary", owner, repo, exc) from exc

    summary = result.get_summary()
    readme = result.content.find("README.md")
    if readme is not None:
        summary = f"{summary}\n\n{render_header(readme.path)}{readme.body.strip()}"
    return summary


def git_tree(owner: OwnerArg, repo: RepoArg, branch: BranchArg = None) -> str:
    if _shutdown_requested:
        logger.info("Shutdown in progress, declining new requests")
        return SHUTDOWN_MESSAGE

    try:
        result = _ingest(owner, repo, branch)
    except IngestError as exc:
        logger.warning(f"Error building tree for {owner}/{repo}: {exc}")
        raise _failure("repository tree", owner, repo, exc) from exc
    except Exception as exc:
        logger.error(f"Unexpected error building tree for {owner}/{repo}: {exc}")
        raise _failure("repository tree", owner, repo, exc) from exc

    return result.get_tree()


def git_files(owner: OwnerArg, repo: RepoArg, file_paths: FilePathsArg, branch: BranchArg = None) -> str:
    if _shutdown_requested:
        logger.info("Shutdown in progress, declining new requests")
        return SHUTDOWN_MESSAGE

    try:
        result = _ingest(owner, repo, branch)
    except IngestError as exc:
        logger.warning(f"Error fetching files from {owner}/{repo}: {exc}")
        raise _failure("file content", owner, repo, exc) from exc
    except Exception as exc:
        logger.error(f"Unexpected error fetching files from {owner}/{repo}: {exc}")
        raise _failure("file content", owner, repo, exc) from exc

    files_content = result.get_content(file_paths)
    if files_content == NO_FILES_FOUND:
        raise ToolError("None of the requested files were found in the repository")
    return files_content


def _register_tools() -> None:
    """Register MCP tools with the server."""
    tool_descriptions = {
        "git_summary": GIT_SUMMARY_DESCRIPTION,
        "git_tree": GIT_TREE_DESCRIPTION,
        "git_files": GIT_FILES_DESCRIPTION,
    }

    tools = [
        (git_summary, "git_summary"),
        (git_tree, "git_tree"),
        (git_files, "git_files"),
    ]

    for tool_func, tool_name in tools:
        description = tool_descriptions.get(tool_name, "")
        server.tool(name=tool_name, description=description)(tool_func)
        logger.info(f"Registered tool: {tool_name}")


async def _run_server() -> None:
    """Run the FastMCP server on stdio, or on both HTTP and SSE transports."""
    if config.transport == "stdio":
        await server.run_stdio_async()
        return

    tasks = [
        server.run_http_async(
            transport="streamable-http",
            host="0.0.0.0",
            path="/gitingest/mcp",
            port=config.streamable_http_port,
        ),
        server.run_http_async(transport="sse", host="0.0.0.0", path="/gitingest/sse", port=config.sse_port),
    ]
    await asyncio.gather(*tasks)


def main() -> None:
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    _register_tools()

    try:
        logger.info(f"Starting GitIngest MCP server ({config.transport})...")
        asyncio.run(_run_server())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt (CTRL+C)")
    except Exception as exc:
        logger.error(f"Server error: {exc}")
        raise
    finally:
        logger.info("Server has shut down.")


if __name__ == "__main__":
    main()
