"""Persisting the release store and rendering it for humans."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from r2c.errors import FileWriteFailure
from r2c.logging_config import get_logger
from r2c.schemas import Category, Release
from r2c.store import ReleaseStore

logger = get_logger(__name__)

OUTPUT_MODE = 0o644

_DUMP_SECTIONS: tuple[tuple[str, Category], ...] = (
    ("Fixes", Category.FIXES),
    ("Features", Category.FEATURES),
    ("Maintenance", Category.MAINTENANCE),
    ("Changes", Category.CHANGES),
)


def write_releases(store: ReleaseStore, path: str | Path) -> Path:
    """Serialize ``store`` and write it to ``path``, replacing any old file.

    The JSON is encoded before anything touches the disk, and the file is
    swapped in with os.replace, so a failure leaves the previous file (or
    no file) rather than a truncated one.
    If ``path`` is a symlink the link itself is replaced, not its target.

    Args:
        store: Releases to write
        path: Destination file

    Returns:
        The path written

    Raises:
        SerializationFailure: If the store cannot be encoded
        FileWriteFailure: If the file cannot be written
    """
    payload = store.serialize()
    target = Path(path)

    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb", dir=target.parent, prefix=f".{target.name}.", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(payload)
        os.chmod(tmp_name, OUTPUT_MODE)
        os.replace(tmp_name, target)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise FileWriteFailure(str(target), exc.strerror or str(exc)) from exc

    logger.info(
        "releases_written",
        path=str(target),
        releases=len(store),
        with_notes=store.notes_count(),
        bytes=len(payload),
    )
    return target


def dump_release(release: Release) -> str:
    """Render one release as an indented, human-readable block."""
    lines = [
        f"Name: {release.name}",
        f"ZipballUrl: {release.zipball_url}",
        f"TarballUrl: {release.tarball_url}",
        "Commit:",
        f"\tSHA: {release.commit.sha}",
        f"\tURL: {release.commit.url}",
    ]
    notes = release.release_notes
    if notes is None:
        lines.append("Release Notes: (none)")
    else:
        lines.append("Release Notes:")
        lines.append(f"\tVersion: {notes.version}")
        for title, category in _DUMP_SECTIONS:
            lines.append(f"\t{title}:")
            lines.extend(f"\t\t * {entry}" for entry in notes.entries(category))
    return "\n".join(lines) + "\n"


def dump_releases(store: ReleaseStore) -> str:
    """Render every release in the store, separated by blank lines."""
    return "\n".join(dump_release(release) for release in store)
