"""
Project-root and `.env` helpers.

The CLI, the API server and pytest are started from different working directories,
yet the configured catalog paths (`data/catalogs/...`) are relative to the repo.
Paths are therefore resolved against a discovered project root, and a repo-local
`.env` is loaded from that same root (real environment variables always win).

Environment:
- `STREETBITE_PROJECT_ROOT`: pin the root explicitly.
- `STREETBITE_ENV_FILE`: load this file instead of `<root>/.env` (its directory becomes the root).
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Any one of these marks a directory as the project root.
_ROOT_FILES = (".env", "pyproject.toml")
_ROOT_DIRS = (".git",)


def _is_project_root(directory: Path) -> bool:
    if any((directory / name).is_file() for name in _ROOT_FILES):
        return True
    if any((directory / name).exists() for name in _ROOT_DIRS):
        return True
    # Source checkouts without packaging metadata.
    return (directory / "src").is_dir() and (directory / "data").is_dir()


def find_project_root(start: Path) -> Path | None:
    """Walk from `start` up to the filesystem root; return the first project root found."""
    start = start.resolve()
    for directory in (start, *start.parents):
        if _is_project_root(directory):
            return directory
    return None


def _explicit_env_file() -> Path | None:
    raw = os.getenv("STREETBITE_ENV_FILE")
    return Path(raw).expanduser().resolve() if raw else None


@lru_cache
def get_project_root() -> Path:
    """Return the project root (cached); falls back to the current directory."""
    pinned = os.getenv("STREETBITE_PROJECT_ROOT")
    if pinned:
        return Path(pinned).expanduser().resolve()

    env_file = _explicit_env_file()
    if env_file is not None:
        return env_file.parent

    root = find_project_root(Path.cwd()) or find_project_root(Path(__file__).parent)
    return root or Path.cwd().resolve()


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the project `.env` once; return the file that was loaded, if any."""
    env_path = _explicit_env_file() or get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Absolute paths pass through; relative ones are taken from the project root."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return (get_project_root() / candidate).resolve()
