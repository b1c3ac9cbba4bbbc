"""Deep link routing."""

from delivery_dashboard.router.fragment import (
    FRAGMENT_PATTERN,
    ParsedFragment,
    fragment_for_version,
    parse_fragment,
)
from delivery_dashboard.router.router import FragmentRouter


__all__ = [
    "FRAGMENT_PATTERN",
    "FragmentRouter",
    "ParsedFragment",
    "fragment_for_version",
    "parse_fragment",
]
