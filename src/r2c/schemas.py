"""Pydantic models for releases and their changelog notes.

The field names match the GitHub tags API on the way in and the r2c.json
document on the way out, so the same models validate both.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Category(str, Enum):
    """Classification of a changelog comment block.

    The value is the ReleaseNotes attribute a block is appended to.
    CHANGES is used when no recognised category heading is active.
    """

    FIXES = "fixes"
    FEATURES = "features"
    MAINTENANCE = "maintenance"
    CHANGES = "changes"


# ---------------------------------------------------------------------------
# Tag metadata
# ---------------------------------------------------------------------------


class Commit(BaseModel):
    """The commit a tag points at.

    Attributes:
        sha: Full commit SHA
        url: API URL of the commit
    """

    sha: str = Field("", description="Commit SHA")
    url: str = Field("", description="Commit API URL")


class ReleaseNotes(BaseModel):
    """Structured changelog notes attached to one release.

    Each list entry is one comment block; multi-line blocks keep their
    lines joined with "\\n".

    Attributes:
        release_name: Raw text of the changelog heading the notes came from
        version: Tag name the notes were attached to (e.g. "v24.0.0")
        fixes: Blocks listed under a "Fixes" heading
        features: Blocks listed under a "Features" heading
        maintenance: Blocks listed under a "Chore & Maintenance" heading
        changes: Blocks outside any recognised category
    """

    release_name: str = Field("", description="Changelog heading text")
    version: str = Field("", description="Tag name the notes belong to")
    fixes: list[str] = Field(default_factory=list, description="Bug fixes")
    features: list[str] = Field(default_factory=list, description="New features")
    maintenance: list[str] = Field(
        default_factory=list, description="Chores and maintenance"
    )
    changes: list[str] = Field(
        default_factory=list, description="Uncategorised changes"
    )

    def entries(self, category: Category) -> list[str]:
        """Return the (mutable) list that holds blocks of ``category``."""
        return getattr(self, category.value)


class Release(BaseModel):
    """One upstream tag plus its optional changelog notes.

    Attributes:
        name: Tag name, the release's identity (e.g. "v24.0.0")
        zipball_url: Source archive URL (zip)
        tarball_url: Source archive URL (tar.gz)
        commit: Commit the tag points at
        release_notes: Notes parsed from the changelog, None if the
                       changelog never mentions this version
    """

    name: str = Field("", description="Tag name")
    zipball_url: str = Field("", description="Zip archive URL")
    tarball_url: str = Field("", description="Tarball archive URL")
    commit: Commit = Field(default_factory=Commit, description="Tagged commit")
    release_notes: ReleaseNotes | None = Field(
        None, description="Parsed changelog notes"
    )
