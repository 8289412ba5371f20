"""Key translators: turn sorted-set members into record identifiers."""

from typing import Any, Callable, Hashable


class KeyTranslationError(ValueError):
    """Raised when a member does not have the expected key format."""
    pass


def identity_key(key: str) -> str:
    """
    Use the member itself as the identifier.

    Members are strings, so "42" never matches an integer primary key 42;
    use prefixed_key(..., int) or delimited_key(..., cast=int) for those.
    """
    return key


def prefixed_key(prefix: str, cast: Callable[[str], Any] = str) -> Callable[[str], Hashable]:
    """
    Translator for namespaced members such as "job:42".

    Args:
        prefix: Namespace prefix including its separator (e.g. "job:")
        cast: Applied to the remainder (e.g. int for integer primary keys)

    Example:
        prefixed_key("job:", int)("job:42") -> 42
    """
    def translate(key: str) -> Hashable:
        if not key.startswith(prefix) or len(key) == len(prefix):
            raise KeyTranslationError(f"Key '{key}' does not start with '{prefix}'")
        try:
            return cast(key[len(prefix):])
        except ValueError as e:
            raise KeyTranslationError(f"Key '{key}' has an invalid identifier: {e}") from e

    return translate


def delimited_key(
    separator: str,
    index: int = -1,
    cast: Callable[[str], Any] = str,
) -> Callable[[str], Hashable]:
    """
    Translator that picks one segment of a delimited member.

    Example:
        delimited_key(":")("acme|greenhouse:12345") -> "12345"
    """
    def translate(key: str) -> Hashable:
        parts = key.split(separator)
        try:
            segment = parts[index]
        except IndexError:
            raise KeyTranslationError(
                f"Key '{key}' has no segment {index} when split on '{separator}'"
            ) from None
        if not segment:
            raise KeyTranslationError(f"Key '{key}' has an empty segment {index}")
        try:
            return cast(segment)
        except ValueError as e:
            raise KeyTranslationError(f"Key '{key}' has an invalid identifier: {e}") from e

    return translate
