"""
Configuration for the prompt server.

The only setting read from the environment is the prompts directory
(PROMPTS_DIR). Without it, prompts live in a ``prompts/`` directory next to
the installed package.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .frontmatter import PREVIEW_LENGTH

SERVER_NAME = "promptdir"
PROMPTS_DIR_ENV = "PROMPTS_DIR"
VERBOSE_ENV = "PROMPTS_VERBOSE"


def get_default_prompts_dir() -> Path:
    """The ``prompts/`` directory adjacent to the program."""
    return Path(__file__).resolve().parent.parent / "prompts"


def get_prompts_dir() -> Path:
    """Resolve the prompts directory: PROMPTS_DIR, else the default."""
    env_dir = os.environ.get(PROMPTS_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    return get_default_prompts_dir()


def _package_version() -> str:
    from . import __version__
    return __version__


@dataclass
class ServerConfig:
    """Complete server configuration."""
    prompts_dir: Path = field(default_factory=get_prompts_dir)
    name: str = SERVER_NAME
    version: str = field(default_factory=_package_version)
    preview_length: int = PREVIEW_LENGTH

    @property
    def verbose(self) -> bool:
        return os.environ.get(VERBOSE_ENV) == "1"


def load_config(prompts_dir: Optional[Path] = None) -> ServerConfig:
    """
    Build the server configuration.

    An explicit prompts_dir overrides PROMPTS_DIR.
    """
    if prompts_dir is not None:
        return ServerConfig(prompts_dir=Path(prompts_dir).expanduser())
    return ServerConfig()
