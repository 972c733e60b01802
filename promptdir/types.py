"""
Data types for the prompt directory.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


DIFFICULTY_LEVELS = frozenset({"beginner", "intermediate", "advanced"})


def validate_difficulty(difficulty: str) -> None:
    """Validate a difficulty level for structured prompts."""
    if difficulty not in DIFFICULTY_LEVELS:
        allowed = ", ".join(sorted(DIFFICULTY_LEVELS))
        raise ValueError(f"Difficulty must be one of: {allowed} (got {difficulty!r})")


class CacheState(str, Enum):
    """Lifecycle of the metadata cache's initial scan."""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class PromptInfo:
    """
    Cached view of one prompt file.

    Holds the parsed frontmatter and a short preview of the body, never the
    full body text. The path is not stored; it is always derived from the
    name and the prompts directory.

    Attributes:
        name: Canonical name (filename without the .md suffix)
        metadata: Frontmatter mapping in file order, empty when absent
        preview: First 100 body characters, single-line, with "..." appended
    """
    name: str
    metadata: dict[str, Any] = field(default_factory=dict)
    preview: str = ""

    @property
    def title(self) -> str | None:
        value = self.metadata.get("title")
        return str(value) if value is not None else None

    @property
    def tags(self) -> list[str]:
        value = self.metadata.get("tags")
        if isinstance(value, list):
            return [str(v) for v in value]
        if value:
            return [str(value)]
        return []

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "metadata": dict(self.metadata), "preview": self.preview}

    def __str__(self) -> str:
        return f"{self.name}: {self.preview}"
