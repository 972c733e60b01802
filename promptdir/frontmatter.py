"""
YAML frontmatter handling for prompt files.

A prompt file is an optional header followed by free-form Markdown:

    ---
    title: Code Review
    tags: [review, python]
    ---

    Review the following diff...

The header must start on the first line. A header that never closes, fails
to parse, or is not a mapping is treated as part of the body.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"
PREVIEW_LENGTH = 100
PREVIEW_SUFFIX = "..."


@dataclass(frozen=True)
class ParsedPrompt:
    """Result of splitting a prompt file into header metadata and body."""
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def extract(text: str) -> ParsedPrompt:
    """
    Split prompt text into frontmatter metadata and body.

    Never raises for malformed headers: the whole text becomes the body and
    metadata is empty.
    """
    lines = text.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        return ParsedPrompt(metadata={}, body=text)

    for end, line in enumerate(lines[1:], start=1):
        if _is_delimiter(line):
            break
    else:
        logger.debug("Frontmatter is not closed, treating as body")
        return ParsedPrompt(metadata={}, body=text)

    header = "".join(lines[1:end])
    body = "".join(lines[end + 1:])

    try:
        data = yaml.safe_load(header) if header.strip() else {}
    except yaml.YAMLError as e:
        logger.debug("Unparsable frontmatter, treating as body: %s", e)
        return ParsedPrompt(metadata={}, body=text)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        logger.debug("Frontmatter is not a mapping (%s), treating as body", type(data).__name__)
        return ParsedPrompt(metadata={}, body=text)

    return ParsedPrompt(metadata={str(k): v for k, v in data.items()}, body=body)


def make_preview(body: str, length: int = PREVIEW_LENGTH) -> str:
    """First ``length`` characters of the body on one line, plus an ellipsis.

    The ellipsis is appended even when the body is shorter than ``length``.
    """
    return body[:length].replace("\n", " ").strip() + PREVIEW_SUFFIX


def render_prompt(metadata: dict[str, Any], body: str) -> str:
    """Build prompt file text from metadata and body.

    Omits the header entirely when there is no metadata.
    """
    if not metadata:
        return body
    header = yaml.safe_dump(
        metadata, sort_keys=False, allow_unicode=True, default_flow_style=False,
    )
    return f"{DELIMITER}\n{header}{DELIMITER}\n\n{body}"
