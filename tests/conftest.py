"""Shared fixtures: a realistic tags API payload and changelog excerpt."""

from __future__ import annotations

import json

import pytest

from r2c.store import ReleaseStore


def make_tag(version: str) -> dict:
    """One tag object shaped like the GitHub tags API response."""
    sha = (version.lstrip("v").replace(".", "") * 40)[:40]
    return {
        "name": version,
        "zipball_url": f"https://api.github.com/repos/facebook/jest/zipball/refs/tags/{version}",
        "tarball_url": f"https://api.github.com/repos/facebook/jest/tarball/refs/tags/{version}",
        "commit": {
            "sha": sha,
            "url": f"https://api.github.com/repos/facebook/jest/commits/{sha}",
        },
        "node_id": "MDM6UmVmMTU2NjE3NjY6cmVmcy90YWdzL3YyNC4wLjA=",
    }


@pytest.fixture
def tags() -> list[dict]:
    """Tags in API order (newest first)."""
    return [make_tag(v) for v in ("v24.0.0", "v23.6.0", "v22.0.3", "v22.0.2")]


@pytest.fixture
def tags_json(tags: list[dict]) -> str:
    return json.dumps(tags)


@pytest.fixture
def store(tags_json: str) -> ReleaseStore:
    """A store loaded from the sample tags, with no notes yet."""
    s = ReleaseStore()
    s.load_from_tag_list(tags_json)
    return s


@pytest.fixture
def changelog() -> str:
    """An excerpt in the style of jest's CHANGELOG.md."""
    return """# Changelog

## master

### Features

* `[jest-cli]` something not yet released

## jest 24.0.0

### Features

* `[jest-each]` add support for keyPaths in test titles
  ([#6457](https://github.com/facebook/jest/pull/6457))
* `[jest-cli]` add `--init` option

### Fixes

* `[jest-cli]` fix watch mode crash

### Chore & Maintenance

* `[docs]` update CONTRIBUTING.md

## jest 23.6.0

* `[jest-cli]` add `changedSince` to allowed watch mode configs

## jest 22.0.2 && 22.0.3

* Add `jest-cli` to `peerDependencies`

## jest 21.0.0

### Fixes

* not tagged upstream
"""
