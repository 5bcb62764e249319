"""Single-pass parser that files changelog entries under release tags.

The changelog is loosely structured markdown:

    ## jest 24.0.0
    ### Fixes
    * `[jest-cli]` fix the thing ([#123](...))
      continued on a second line
    ### Chore & Maintenance
    * bump dependencies

Each "## " heading starts a release section. The first dotted version in
it becomes the tag key ("v24.0.0"). "### " headings pick the category,
"* " lines start a comment block, and any other line continues the
current block. A block is handed to the store when the next "#" or "*"
line is reached.

Known limitations:
- A heading naming several versions ("jest 22.0.2 && 22.0.3") only
  attaches to the first, unless ParserOptions.fan_out_versions is set.
- The block still buffered at end of input is dropped, unless
  ParserOptions.flush_trailing_comment is set.
- Text flushed before the first "## " heading is keyed by the empty tag
  name, the name of a tag object that has none.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from r2c.config import ParserOptions
from r2c.logging_config import get_logger
from r2c.schemas import Category
from r2c.store import ReleaseStore

logger = get_logger(__name__)

VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")

RELEASE_PREFIX = "## "
CATEGORY_PREFIX = "### "
BULLET_PREFIX = "* "
TRAILING_WHITESPACE = " \t\n\v\f\r"

# Checked in order; the first keyword found in the heading wins.
CATEGORY_KEYWORDS: tuple[tuple[str, Category], ...] = (
    ("Fixes", Category.FIXES),
    ("Features", Category.FEATURES),
    ("Chore & Maintenance", Category.MAINTENANCE),
)


def version_tags(heading: str, fan_out: bool = False) -> list[str]:
    """Derive store keys from a release heading.

    "jest 24.0.0" gives ["v24.0.0"]; a heading with no version gives ["v"].
    With ``fan_out`` every distinct version in the heading is returned.
    """
    if fan_out:
        found = VERSION_PATTERN.findall(heading)
        if found:
            return [f"v{version}" for version in dict.fromkeys(found)]
    match = VERSION_PATTERN.search(heading)
    return [f"v{match.group(0) if match else ''}"]


def category_for(heading: str) -> Category | None:
    """Return the category a "### " heading names, or None."""
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in heading:
            return category
    return None


@dataclass
class ParseStats:
    """Counters collected during one parse.

    Attributes:
        releases_seen: Number of "## " headings encountered
        blocks_flushed: Comment blocks handed to the store
        blocks_attached: Flushed blocks that matched at least one release
    """

    releases_seen: int = 0
    blocks_flushed: int = 0
    blocks_attached: int = 0


class ChangelogParser:
    """Line-oriented state machine over a changelog.

    The parser owns no releases: it writes into the store it is given.
    A parser instance can be reused; each call to parse() starts from a
    clean state.

    Usage:
        parser = ChangelogParser(store)
        stats = parser.parse(changelog_text)
    """

    def __init__(self, store: ReleaseStore, options: ParserOptions | None = None) -> None:
        self.store = store
        self.options = options or ParserOptions()
        self._reset()

    def _reset(self) -> None:
        self.release_heading = ""
        self.current_tags: list[str] = [""]
        self.pending_comment = ""
        self.category: Category | None = None
        self.stats = ParseStats()

    def parse(self, changelog: str) -> ParseStats:
        """Parse ``changelog`` and attach every block to its release.

        Args:
            changelog: Full changelog text

        Returns:
            Counters describing what was found
        """
        self._reset()
        for raw_line in changelog.split("\n"):
            self._feed(raw_line.rstrip(TRAILING_WHITESPACE))

        if self.options.flush_trailing_comment:
            self._flush()

        logger.info(
            "changelog_parsed",
            releases_seen=self.stats.releases_seen,
            blocks_flushed=self.stats.blocks_flushed,
            blocks_attached=self.stats.blocks_attached,
        )
        return self.stats

    def _feed(self, line: str) -> None:
        if not line:
            return

        if line[0] not in "#*":
            self.pending_comment += "\n" + line.strip()
            return

        self._flush()

        if line.startswith(RELEASE_PREFIX):
            self._start_release(line[len(RELEASE_PREFIX):])

        # Nothing is filed until a versioned release heading has been seen.
        if not VERSION_PATTERN.search(self.release_heading):
            return

        if line.startswith(CATEGORY_PREFIX):
            category = category_for(line)
            if category is not None:
                self.category = category
                self.pending_comment = ""

        if line.startswith(BULLET_PREFIX):
            self.pending_comment = line[len(BULLET_PREFIX):]

    def _start_release(self, heading: str) -> None:
        self.release_heading = heading
        self.current_tags = version_tags(heading, self.options.fan_out_versions)
        self.pending_comment = ""
        self.category = None
        self.stats.releases_seen += 1
        logger.debug("release_heading", heading=heading, tags=self.current_tags)

    def _flush(self) -> None:
        if not self.pending_comment:
            return

        category = self.category or Category.CHANGES
        attached = 0
        for tag in self.current_tags:
            attached += self.store.append_note(
                category, self.release_heading, tag, self.pending_comment
            )

        self.stats.blocks_flushed += 1
        if attached:
            self.stats.blocks_attached += 1

        if self.options.reset_after_flush:
            self.pending_comment = ""


def parse_changelog(
    changelog: str,
    store: ReleaseStore,
    options: ParserOptions | None = None,
) -> ParseStats:
    """Parse ``changelog`` into ``store``. See ChangelogParser."""
    return ChangelogParser(store, options).parse(changelog)
