# stackshift/core/file_utils.py
from __future__ import annotations

import fnmatch
import io
import logging
import posixpath
import re
import zipfile
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from .config import Settings, get_settings
from .schema import ProjectFile

logger = logging.getLogger(__name__)

IGNORED_DIRS = ("node_modules", "dist", "build")

# Directory patterns match a whole path segment, bare names match the file
# name exactly, globs are matched against the file name.
SKIP_PATTERNS = (
    "node_modules/", ".git/", ".svn/", ".hg/", "dist/", "build/", "out/", "target/",
    "bin/", "obj/", ".next/", ".nuxt/", ".output/", ".cache/", ".temp/", ".tmp/",
    "coverage/", ".nyc_output/", "logs/", "__pycache__/", ".pytest_cache/", ".tox/",
    "venv/", "env/", ".venv/", ".idea/", ".vscode/",
    "*.log", "*.pyc", "*.swp", "*.swo", "*~", ".env*",
    ".DS_Store", "Thumbs.db",
    "package-lock.json", "yarn.lock", "pnpm-lock.yaml", "composer.lock",
    "Pipfile.lock", "poetry.lock", "Gemfile.lock",
)

BINARY_EXTENSIONS = frozenset({
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico",
    ".woff", ".woff2", ".ttf", ".eot", ".otf",
    ".zip", ".tar", ".gz", ".rar", ".7z",
    ".pdf", ".doc", ".docx", ".xls", ".xlsx",
    ".mp3", ".mp4", ".avi", ".mov", ".wmv",
})

FILE_TYPES = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".dart": "dart",
    ".go": "go",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "sass",
    ".less": "less",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".md": "markdown",
    ".txt": "text",
    ".svg": "svg",
    ".png": "image",
    ".jpg": "image",
    ".jpeg": "image",
    ".gif": "image",
}


def _not_ignored(p: Path, root: Path = Path(".")) -> bool:
    parts = p.relative_to(root).parts if p.is_relative_to(root) else p.parts
    return not any(part in parts for part in IGNORED_DIRS)


def list_files(pattern_or_path: str) -> list[Path]:
    """
    - a file: just that file
    - a directory: every file below it
    - a glob pattern: every matching file
    """
    path = Path(pattern_or_path)

    if path.exists() and path.is_file():
        return [path.resolve()]

    if path.exists() and path.is_dir():
        return [p.resolve() for p in path.rglob("*") if p.is_file() and _not_ignored(p, path)]

    matches = list(Path(".").glob(pattern_or_path))
    if matches:
        return [m.resolve() for m in matches if m.is_file() and _not_ignored(m)]

    raise FileNotFoundError(f"No files match path or pattern: {pattern_or_path}")


# -------------------- Upload helpers --------------------

def sanitize_path(original: str) -> str:
    """Drops `..`, normalizes separators and strips leading slashes."""
    cleaned = original.replace("..", "").replace("\\", "/")
    cleaned = re.sub(r"/{2,}", "/", cleaned)
    return cleaned.lstrip("/")


def should_skip_file(file_name: str) -> bool:
    if file_name.endswith("/"):
        return True

    normalized = "/" + file_name.replace("\\", "/").lower()
    base = posixpath.basename(normalized)

    for pattern in SKIP_PATTERNS:
        pattern = pattern.lower()
        if pattern.endswith("/"):
            if f"/{pattern}" in normalized:
                return True
        elif "*" in pattern or "?" in pattern:
            if fnmatch.fnmatchcase(base, pattern):
                return True
        elif base == pattern:
            return True
    return False


def is_binary_file(file_name: str) -> bool:
    return posixpath.splitext(file_name.lower())[1] in BINARY_EXTENSIONS


def get_file_type(file_name: str) -> str:
    return FILE_TYPES.get(posixpath.splitext(file_name.lower())[1], "unknown")


def _build_project_file(path: str, data: bytes) -> ProjectFile:
    if is_binary_file(path):
        content = f"[Binary file: {posixpath.basename(path)}]"
    else:
        content = data.decode("utf-8", errors="replace")
    return {"path": path, "content": content, "size": len(data), "type": get_file_type(path)}


def read_zip_archive(data: bytes, settings: Optional[Settings] = None) -> List[ProjectFile]:
    """
    Unpacks an uploaded ZIP into ProjectFiles. Skipped entries (cache/build
    dirs, lockfiles, oversized files) are dropped silently; exceeding the total
    size limit raises ValueError.
    """
    settings = settings or get_settings()

    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise ValueError(f"Failed to open ZIP file: {e}") from e

    files: List[ProjectFile] = []
    total_size = 0

    with archive:
        for info in archive.infolist():
            if info.is_dir() or should_skip_file(info.filename):
                continue
            if info.file_size > settings.max_file_size:
                logger.warning("Skipping %s: %d bytes exceeds per-file limit", info.filename, info.file_size)
                continue

            total_size += info.file_size
            if total_size > settings.max_total_size:
                raise ValueError(
                    f"Total upload size exceeds limit of {settings.max_total_size // (1024 * 1024)}MB"
                )

            path = sanitize_path(info.filename)
            if not path:
                continue
            files.append(_build_project_file(path, archive.read(info)))

    logger.info("Read %d files (%d bytes) from archive", len(files), total_size)
    return files


def read_directory(root: Path, settings: Optional[Settings] = None) -> List[ProjectFile]:
    settings = settings or get_settings()
    files: List[ProjectFile] = []
    total_size = 0

    base = root.resolve()
    for p in sorted(list_files(str(root))):
        rel = p.relative_to(base).as_posix()
        if should_skip_file(rel):
            continue
        size = p.stat().st_size
        if size > settings.max_file_size:
            logger.warning("Skipping %s: %d bytes exceeds per-file limit", rel, size)
            continue

        total_size += size
        if total_size > settings.max_total_size:
            raise ValueError(
                f"Total upload size exceeds limit of {settings.max_total_size // (1024 * 1024)}MB"
            )
        files.append(_build_project_file(rel, p.read_bytes()))

    logger.info("Read %d files (%d bytes) from %s", len(files), total_size, root)
    return files


def load_project_files(path_str: str, settings: Optional[Settings] = None) -> List[ProjectFile]:
    """ProjectFiles from a directory, a .zip archive or a single file."""
    path = Path(path_str)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path.resolve()}")

    if path.is_dir():
        return read_directory(path, settings)
    if path.suffix.lower() == ".zip":
        return read_zip_archive(path.read_bytes(), settings)

    settings = settings or get_settings()
    data = path.read_bytes()
    if len(data) > settings.max_file_size:
        raise ValueError(f"File size {len(data)} exceeds maximum of {settings.max_file_size}")
    return [_build_project_file(path.name, data)]


def create_download_archive(files: Iterable[Mapping[str, object]]) -> bytes:
    """ZIP (deflate, level 9) of `{path, content}` or `{newPath, content}` records."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for f in files:
            name = f.get("path") or f.get("newPath")
            if not name:
                raise ValueError("Archive entry has neither 'path' nor 'newPath'")
            archive.writestr(str(name), str(f.get("content", "")))
    return buffer.getvalue()
