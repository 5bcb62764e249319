"""In-memory store of releases, keyed by tag name.

The store is filled once from the tags API response and then enriched in
place by the changelog parser. Releases are never added or removed after
loading; notes for a version with no matching tag are dropped.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import TypeAdapter, ValidationError

from r2c.errors import DeserializationFailure, SerializationFailure
from r2c.logging_config import get_logger
from r2c.schemas import Category, Release, ReleaseNotes

logger = get_logger(__name__)

_release_list = TypeAdapter(list[Release])


def _omit_empty(value: Any) -> Any:
    """Recursively drop empty strings, lists, mappings and None values."""
    if isinstance(value, dict):
        pruned = {k: _omit_empty(v) for k, v in value.items()}
        return {k: v for k, v in pruned.items() if v not in ("", [], {}, None)}
    if isinstance(value, list):
        return [_omit_empty(v) for v in value]
    return value


class ReleaseStore:
    """Ordered sequence of releases with lookup by tag name.

    Order is the order of the upstream tag list (newest first for GitHub).

    Usage:
        store = ReleaseStore()
        store.load_from_tag_list(tags_json)
        store.append_note(Category.FIXES, "jest 24.0.0", "v24.0.0", "fixed it")
        payload = store.serialize()
    """

    def __init__(self) -> None:
        self._releases: list[Release] = []
        self._index: dict[str, list[Release]] = {}

    @classmethod
    def from_releases(cls, releases: Iterable[Release]) -> ReleaseStore:
        """Build a store from already-validated releases."""
        store = cls()
        store._replace(list(releases))
        return store

    def __len__(self) -> int:
        return len(self._releases)

    def __iter__(self) -> Iterator[Release]:
        return iter(self._releases)

    @property
    def releases(self) -> tuple[Release, ...]:
        return tuple(self._releases)

    def _replace(self, releases: list[Release]) -> None:
        self._releases = releases
        self._index = {}
        for release in releases:
            self._index.setdefault(release.name, []).append(release)

    def load_from_tag_list(self, payload: str | bytes) -> None:
        """Replace the store's contents with the tags in ``payload``.

        Args:
            payload: JSON array of tag objects, as returned by the
                     GitHub tags API

        Raises:
            DeserializationFailure: If the payload is not valid JSON or
                                    not an array of tag objects
        """
        try:
            releases = _release_list.validate_json(payload)
        except ValidationError as exc:
            raise DeserializationFailure(f"Malformed tag list: {exc}") from exc
        self._replace(releases)
        logger.debug("store_loaded", releases=len(releases))

    def find_by_name(self, name: str) -> Release | None:
        """Return the first release whose tag name is exactly ``name``."""
        matches = self._index.get(name)
        return matches[0] if matches else None

    def append_note(
        self,
        category: Category,
        release_heading: str,
        version: str,
        text: str,
    ) -> int:
        """Append a comment block to the notes of release ``version``.

        Notes are created on first use. ``release_name`` and ``version``
        are overwritten on every call, so the last heading seen for a tag
        is the one recorded.

        Args:
            category: Which notes list receives the block
            release_heading: Raw changelog heading the block appeared under
            version: Tag name to attach to (e.g. "v24.0.0")
            text: The comment block

        Returns:
            Number of releases the block was attached to (0 if no tag
            has that name)
        """
        matches = self._index.get(version, [])
        for release in matches:
            if release.release_notes is None:
                release.release_notes = ReleaseNotes()
            release.release_notes.release_name = release_heading
            release.release_notes.version = version
            release.release_notes.entries(category).append(text)
        return len(matches)

    def notes_count(self) -> int:
        """Number of releases that have changelog notes attached."""
        return sum(1 for r in self._releases if r.release_notes is not None)

    def to_json_data(self) -> list[dict[str, Any]]:
        """Plain JSON-ready data with empty optional fields omitted."""
        return [
            _omit_empty(release.model_dump(mode="json"))
            for release in self._releases
        ]

    def serialize(self) -> bytes:
        """Encode the store as a compact UTF-8 JSON array.

        Raises:
            SerializationFailure: If a release cannot be encoded
        """
        try:
            text = json.dumps(
                self.to_json_data(), ensure_ascii=False, separators=(",", ":")
            )
        except (TypeError, ValueError) as exc:
            raise SerializationFailure(f"Could not encode releases: {exc}") from exc
        return text.encode("utf-8")
