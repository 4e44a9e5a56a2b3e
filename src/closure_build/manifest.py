"""Dependency manifest reader.

The collector asks the compiler for a manifest: the files an entry point
needs, in dependency order, one per line, each line newline-terminated.
The build stage reads it exactly once.
"""

from __future__ import annotations

from pathlib import Path

from closure_build.core.errors import EmptyManifestError, ManifestNotFoundError


def parse_manifest(text: str) -> list[str]:
    """Split manifest text into paths.

    Drops the single empty entry left after the final line terminator. A
    manifest without a final newline keeps its last path.
    """
    entries = [line.rstrip("\r") for line in text.split("\n")]
    if entries and entries[-1] == "":
        entries.pop()
    return entries


def read_manifest(path: Path | str) -> list[str]:
    """Read the manifest at ``path``.

    Raises:
        ManifestNotFoundError: The manifest does not exist.
        EmptyManifestError: The manifest names no files.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestNotFoundError(str(path), cause=exc) from exc

    files = parse_manifest(text)
    if not any(files):
        raise EmptyManifestError(str(path))
    return files


__all__ = ["parse_manifest", "read_manifest"]
