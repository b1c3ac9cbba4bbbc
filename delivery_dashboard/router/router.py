"""Fragment router feeding version selections into the dashboard."""

from collections.abc import Callable, Iterable

import structlog

from delivery_dashboard.config.constants import COMPONENT_ROUTER, PRODUCTS
from delivery_dashboard.router.fragment import ParsedFragment, parse_fragment


logger = structlog.get_logger()

SelectionHandler = Callable[[str, str], object]


class FragmentRouter:
    """Maps fragments to version selection requests.

    Called once at startup with the initial fragment and again on every
    fragment change; both go through the same parse and dispatch path.
    Unrecognized fragments are ignored.
    """

    def __init__(
        self,
        on_selection: SelectionHandler,
        products: Iterable[str] = PRODUCTS,
    ) -> None:
        """Initialize the router.

        Args:
            on_selection: Called with ``(product, version)`` on a match.
            products: Supported products.
        """
        self._on_selection = on_selection
        self._products = tuple(products)
        self._log = logger.bind(component=COMPONENT_ROUTER)

    def route(self, fragment: str) -> ParsedFragment | None:
        """Parse a fragment and request the selection it encodes.

        Args:
            fragment: Address-bar fragment.

        Returns:
            The parsed fragment, or None if it was ignored.
        """
        parsed = parse_fragment(fragment, self._products)
        if parsed is None:
            self._log.debug("fragment_ignored", fragment=fragment)
            return None

        self._log.info(
            "fragment_routed", product=parsed.product, version=parsed.version
        )
        self._on_selection(parsed.product, parsed.version)
        return parsed
