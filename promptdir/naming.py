"""
Mapping between prompt names and filenames.

The mapping is lossy: any character outside ``[a-zA-Z0-9_-]`` becomes ``_``
and the result is lowercased, so "Hello World!" is stored as
``hello_world_.md`` and listed back as ``hello_world_``. Distinct names that
encode to the same stem share one file (last write wins). Callers should use
the canonical (encoded) name for later lookups.
"""

import re

PROMPT_SUFFIX = ".md"

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]")


def encode_name(name: str) -> str:
    """Return the filesystem-safe stem for a prompt name."""
    return _UNSAFE_CHARS_RE.sub("_", name).lower()


def decode_filename(filename: str) -> str:
    """Return the canonical prompt name for a filename (suffix stripped)."""
    if filename.endswith(PROMPT_SUFFIX):
        return filename[: -len(PROMPT_SUFFIX)]
    return filename


def prompt_filename(name: str) -> str:
    """Filename under which a prompt name is stored."""
    return encode_name(name) + PROMPT_SUFFIX


def is_prompt_filename(filename: str, include_hidden: bool = False) -> bool:
    """True for ``*.md`` files. Dotfiles only count when ``include_hidden``."""
    if not filename.endswith(PROMPT_SUFFIX):
        return False
    return include_hidden or not filename.startswith(".")
