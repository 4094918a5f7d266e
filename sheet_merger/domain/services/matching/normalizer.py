import re

_SEPARATORS_RE = re.compile(r"[\s_\-–—]+")
# \w is Unicode-aware: keeps letters of any script (Hangul included) and digits.
_DISALLOWED_RE = re.compile(r"[^\w\s]")
_SPACES_RE = re.compile(r"\s+")


def normalize_field_name(name: object) -> str:
    """Canonical comparison form of a field name.

    Lowercases, removes whitespace, underscores, hyphens and en/em dashes,
    then drops anything that is not a letter or digit. Used for comparison
    only, never for display.
    """
    if not isinstance(name, str) or not name:
        return ""
    text = name.lower().strip()
    text = _SEPARATORS_RE.sub("", text)
    text = _DISALLOWED_RE.sub("", text)
    return _SPACES_RE.sub("", text)


def same_name_ignoring_case(left: str, right: str) -> bool:
    return left.strip().casefold() == right.strip().casefold()
