"""Source-map writer.

Writes a compiled bundle and its V3 source map into an output directory.
The map's ``sourceRoot`` is set to the configured root (``/`` by default)
so browsers resolve the original sources from the site root, and the
bundle gets a ``sourceMappingURL`` comment pointing at the map next to it.

Files are written to a temporary name in the destination directory and
renamed into place, so a reader never sees a half-written bundle. The map
is moved first: a bundle on disk always has its map.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from closure_build.compiler import OutputFile
from closure_build.core.logging import get_logger

logger = get_logger(__name__)

SOURCE_MAPPING_URL = "//# sourceMappingURL="


def write_atomic(path: Path, content: str) -> Path:
    """Write ``content`` to ``path`` via a temp file and an atomic rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    return path


class SourceMapWriter:
    """Writes bundles with their source maps."""

    def __init__(self, root: str = "/"):
        self.root = root

    def annotate(self, output: OutputFile) -> tuple[str, dict | None]:
        """Return the bundle text and source map as they will be written."""
        if output.source_map is None:
            return output.content, None

        name = Path(output.name).name
        source_map = dict(output.source_map)
        source_map["file"] = name
        source_map["sourceRoot"] = self.root

        content = output.content
        if not content.endswith("\n"):
            content += "\n"
        content += f"{SOURCE_MAPPING_URL}{name}.map\n"
        return content, source_map

    def write(self, output: OutputFile, dest_dir: Path) -> list[Path]:
        """Write ``output`` (and its map, if any) into ``dest_dir``."""
        content, source_map = self.annotate(output)
        target = Path(dest_dir) / Path(output.name).name
        written = []
        if source_map is not None:
            written.append(
                write_atomic(Path(f"{target}.map"), json.dumps(source_map, indent=None))
            )
        written.append(write_atomic(target, content))
        logger.debug("sourcemap.written", files=[str(p) for p in written])
        return written


__all__ = ["SourceMapWriter", "write_atomic", "SOURCE_MAPPING_URL"]
