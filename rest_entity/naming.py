"""Conversion of identifiers into URL path segments."""


def to_hyphenated(value: str) -> str:
    """Convert a camelCase identifier into a hyphenated lowercase segment.

    A hyphen is inserted before every uppercase letter except a leading one,
    e.g. ``"repairAll"`` becomes ``"repair-all"``.
    """
    return "".join(
        f"-{char}" if index > 0 and char.isupper() else char
        for index, char in enumerate(value)
    ).lower()


def to_segment(name: str) -> str:
    """Path segment for a Python or camelCase name.

    Example: ``repair_all`` and ``repairAll`` both become ``repair-all``.
    """
    return to_hyphenated(name.replace("_", "-"))
