"""Fetch -> parse -> write pipeline and the ``r2c`` command.

The pipeline runs strictly in sequence:
1. Fetch the tag list and load it into a ReleaseStore
2. Fetch the changelog
3. Parse the changelog into the store
4. Write the store to the output file

Any failure aborts the run before the output file is touched.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from r2c.config import R2CConfig, load_config
from r2c.errors import R2CError
from r2c.fetcher import FetcherProtocol, HttpFetcher
from r2c.logging_config import get_logger, setup_logging
from r2c.parser import ChangelogParser
from r2c.store import ReleaseStore
from r2c.writer import dump_releases, write_releases

logger = get_logger(__name__)


class ReleaseCollator:
    """Builds the merged release document.

    Usage:
        collator = ReleaseCollator(config=R2CConfig())
        store = await collator.collect()
        collator.write(store)
    """

    def __init__(
        self,
        config: R2CConfig | None = None,
        fetcher: FetcherProtocol | None = None,
    ) -> None:
        """Initialize the collator with its dependencies.

        Args:
            config: Runtime configuration. Uses defaults if None.
            fetcher: Source of remote documents. An HttpFetcher built from
                     the config is used if None.
        """
        self.config = config or R2CConfig()
        self.fetcher = fetcher or HttpFetcher(
            token=self.config.resolved_token(),
            timeout=self.config.timeout,
        )

    async def collect(self) -> ReleaseStore:
        """Fetch tags and changelog and return the enriched store.

        Raises:
            NetworkFailure: If either download fails
            DeserializationFailure: If the tag list is malformed
        """
        store = ReleaseStore()

        tags = await self.fetcher.fetch(self.config.tags_url)
        store.load_from_tag_list(tags)
        logger.info("tags_loaded", url=self.config.tags_url, releases=len(store))

        changelog = await self.fetcher.fetch(self.config.changelog_url)
        ChangelogParser(store, self.config.parser).parse(changelog)
        logger.info(
            "notes_attached",
            releases=len(store),
            with_notes=store.notes_count(),
        )
        return store

    def write(self, store: ReleaseStore) -> None:
        """Persist ``store`` to the configured output path."""
        write_releases(store, self.config.output_path)

    async def run(self) -> ReleaseStore:
        """Collect and write in one go."""
        store = await self.collect()
        self.write(store)
        return store


# ---------------------------------------------------------------------------
# CLI Entry Point
# ---------------------------------------------------------------------------


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="r2c",
        description="Merge upstream release tags with their changelog notes.",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to a YAML config file (defaults are used if omitted)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write the JSON document here instead of the configured path",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print every release with its notes to stdout",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Usage:
        r2c
        r2c --config r2c.yaml --output out/r2c.json --dump

    Exits 0 on success and 1 on any failure.
    """
    args = build_arg_parser().parse_args(argv)
    setup_logging()

    try:
        config = load_config(args.config)
        if args.output:
            config = config.model_copy(update={"output_path": args.output})

        collator = ReleaseCollator(config=config)
        store = asyncio.run(collator.collect())
        if args.dump:
            print(dump_releases(store))
        collator.write(store)
    except R2CError as e:
        logger.error("pipeline_failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    main()
