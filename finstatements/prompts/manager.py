"""Versioned system prompts for the Claude extraction backend.

Usage:
    manager = PromptManager()
    prompt = manager.get("metric_extraction")           # latest version
    prompt = manager.get("inconsistency_detection", version="v1")
    metadata = manager.get_metadata("metric_extraction", version="v1")
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptManager:
    """Load versioned prompt templates from disk.

    Layout::

        templates/{prompt_name}/v{N}.txt
        templates/{prompt_name}/metadata.json   # {"v1": {...}, "v2": {...}}

    Loaded texts are cached per instance.

    Examples:
        >>> manager = PromptManager()
        >>> manager.list_versions("metric_extraction")
        ['v1']
    """

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir is not None else TEMPLATES_DIR
        if not self.base_dir.exists():
            raise FileNotFoundError(
                f"Prompt templates directory not found: {self.base_dir}"
            )
        self._cache: Dict[Tuple[str, str], str] = {}
        logger.debug("PromptManager using %s", self.base_dir)

    def get(self, prompt_name: str, version: str = "latest") -> str:
        """Return the template text for ``prompt_name`` at ``version``.

        Raises:
            FileNotFoundError: unknown prompt or version.
        """
        if version == "latest":
            version = self.latest_version(prompt_name)

        key = (prompt_name, version)
        if key not in self._cache:
            path = self.base_dir / prompt_name / f"{version}.txt"
            if not path.exists():
                raise FileNotFoundError(
                    f"Prompt '{prompt_name}' version '{version}' not found at {path}"
                )
            self._cache[key] = path.read_text(encoding="utf-8").strip()
            logger.debug(
                "Loaded prompt %s:%s (%d chars)",
                prompt_name,
                version,
                len(self._cache[key]),
            )
        return self._cache[key]

    def get_metadata(self, prompt_name: str, version: str) -> Dict:
        """Metadata for one version, or an empty dict when none is recorded."""
        meta_path = self.base_dir / prompt_name / "metadata.json"
        if not meta_path.exists():
            return {}
        try:
            metadata = json.loads(meta_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON in %s: %s", meta_path, exc)
            return {}
        return metadata.get(version, {})

    def list_versions(self, prompt_name: str) -> List[str]:
        prompt_dir = self.base_dir / prompt_name
        if not prompt_dir.is_dir():
            return []
        return sorted((p.stem for p in prompt_dir.glob("v*.txt")), key=_version_number)

    def latest_version(self, prompt_name: str) -> str:
        versions = self.list_versions(prompt_name)
        if not versions:
            raise FileNotFoundError(
                f"No versions found for prompt '{prompt_name}' in {self.base_dir}"
            )
        return versions[-1]


def _version_number(version: str) -> int:
    """Numeric part of a version tag: "v10" sorts after "v2".

    >>> _version_number("v10")
    10
    >>> _version_number("vX")
    0
    """
    digits = "".join(ch for ch in version if ch.isdigit())
    return int(digits) if digits else 0
