"""Bucket tag extraction from card titles."""

import re

# Matches a non-nested "[tag]"; an unterminated "[" matches nothing.
TAG_PATTERN = re.compile(r"\[[^\]]+\]")


class TagExtractor:
    """Parses bracketed bucket tags out of card titles."""

    def __init__(self, pattern: re.Pattern[str] = TAG_PATTERN):
        self._pattern = pattern

    @property
    def pattern(self) -> re.Pattern[str]:
        return self._pattern

    def extract(self, title: str) -> list[str]:
        """
        Return the distinct lower-cased tags in a title.

        "[Foo][bar] Task" gives ["foo", "bar"]. Tags are returned in order of
        first appearance; a tag repeated in the same title is returned once.
        """
        tags: dict[str, None] = {}
        for match in self._pattern.finditer(title):
            tags[match.group(0)[1:-1].lower()] = None
        return list(tags)
