"""Selection of individual files out of a serialized content blob.

Two entry points share one matching rule and one output format:

* ``extract_files`` reverses the text rendering by searching for the
  three-line file headers.
* ``extract_sections`` works on the structured sections that produced the
  rendering and is what the server uses.

Known ambiguity of the text form: a file whose body contains a line of fifty
``=`` characters followed by a ``File:`` line is split at that point, and the
remainder is attributed to a file of that name. Only ``extract_sections`` is
free of this.
"""

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ingest.models import DELIMITER, FileSection, render_header

NO_FILES_FOUND = "None of the requested files were found"

_HEADER_RE = re.compile(r"={50}\nFile: ([^\n]+)\n={50}")
_NEXT_HEADER = f"{DELIMITER}\nFile:"


def path_matches(requested: str, recorded: str) -> bool:
    """Whether a requested path refers to a recorded section name.

    A request matches its exact path, a longer path ending in the recorded name,
    or any recorded path ending in the request (so ``README.md`` finds
    ``docs/README.md``).
    """
    return (
        requested == recorded
        or requested.endswith("/" + recorded)
        or recorded.endswith("/" + requested)
    )


def parse_sections(blob: str) -> List[Tuple[str, str]]:
    """Split a content blob into ``(recorded path, trimmed body)`` pairs."""
    parsed = []
    for match in _HEADER_RE.finditer(blob):
        start = match.end()
        end = blob.find(_NEXT_HEADER, start)
        if end == -1:
            end = len(blob)
        parsed.append((match.group(1).strip(), blob[start:end].strip()))
    return parsed


def _select(sections: Sequence[Tuple[str, str]], requested_paths: Iterable[str]) -> Dict[str, str]:
    selected: Dict[str, str] = {}
    for requested in requested_paths:
        if requested in selected:
            continue

        body: Optional[str] = None
        for recorded, candidate in sections:
            if recorded == requested:
                body = candidate
                break
            if body is None and path_matches(requested, recorded):
                body = candidate

        if body is not None:
            selected[requested] = body
    return selected


def _render(selected: Dict[str, str]) -> str:
    if not selected:
        return NO_FILES_FOUND
    return "\n\n".join(f"{render_header(path)}{body}" for path, body in selected.items())


def extract_files(blob: str, requested_paths: Iterable[str]) -> str:
    """Return the requested files of a text blob, in request order."""
    return _render(_select(parse_sections(blob), requested_paths))


def extract_sections(sections: Sequence[FileSection], requested_paths: Iterable[str]) -> str:
    """Return the requested files of a structured section list, in request order."""
    pairs = [(section.path, section.body.strip()) for section in sections]
    return _render(_select(pairs, requested_paths))
