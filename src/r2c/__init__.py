"""Release-to-changelog collator.

Fetches an upstream project's release tags and its markdown changelog,
attaches each changelog entry to the tag whose version it names, and
writes the merged result as JSON.
"""

__version__ = "0.1.0"
