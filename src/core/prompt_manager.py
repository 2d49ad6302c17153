import pathlib
from typing import Any, Dict, Optional

import yaml


class PromptManager:
    """Loads tool descriptions and other prompt text from a YAML file."""

    def __init__(self, file_path: pathlib.Path):
        self.file_path = pathlib.Path(file_path)
        self._prompts: Optional[Dict[str, Any]] = None

    def _load_file(self) -> Dict[str, Any]:
        if self._prompts is None:
            with self.file_path.open(encoding="utf-8") as handle:
                self._prompts = yaml.safe_load(handle) or {}
        return self._prompts

    def _load_prompt(self, key: str) -> str:
        """Look up a prompt by dotted key, e.g. ``tools.git_tree``.

        Raises:
            KeyError: If no string prompt exists under the key
        """
        node: Any = self._load_file()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                raise KeyError(f"Prompt '{key}' not found in {self.file_path}")
            node = node[part]

        if not isinstance(node, str):
            raise KeyError(f"Prompt '{key}' in {self.file_path} is not text")
        return node.strip()
