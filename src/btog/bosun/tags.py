"""OpenTSDB-style tag sets as used in Bosun expressions."""

from collections.abc import Iterable

WILDCARD = "*"


class TagSet(dict[str, str]):
    """Mapping of tag key to tag value.

    Example:
        >>> ts = parse_tags("host=web01,dc=*")
        >>> ts.tags()
        'dc=*,host=web01'
        >>> str(ts)
        '{dc=*,host=web01}'
    """

    def tags(self) -> str:
        """Render as ``k=v,...`` alphabetized by key, without braces."""
        return ",".join(f"{key}={self[key]}" for key in sorted(self))

    def __str__(self) -> str:
        return f"{{{self.tags()}}}"

    def copy(self) -> "TagSet":
        return TagSet(self)

    def merge(self, other: dict[str, str]) -> "TagSet":
        """Add every entry of ``other``, overwriting existing keys. Returns self."""
        self.update(other)
        return self

    def fill_wildcards(self, keys: Iterable[str]) -> "TagSet":
        """Add ``key=*`` for each key not already present. Returns self."""
        return self.merge({key: WILDCARD for key in keys if key not in self})


def parse_tags(text: str) -> TagSet:
    """Parse a ``k=v,k2=v2`` string into a TagSet.

    Args:
        text: Comma separated tag pairs; an empty string yields an empty set

    Returns:
        TagSet: Parsed tags

    Raises:
        ValueError: On an entry that is not ``key=value`` or on a repeated key
    """
    tag_set = TagSet()
    if not text:
        return tag_set

    for entry in text.split(","):
        key, sep, value = entry.partition("=")
        key = key.strip()
        value = value.strip()
        if not sep or not key or not value:
            msg = f"invalid tag: {entry}"
            raise ValueError(msg)
        if key in tag_set:
            msg = f"duplicate tag: {key}"
            raise ValueError(msg)
        tag_set[key] = value

    return tag_set


__all__ = ["WILDCARD", "TagSet", "parse_tags"]
