"""Route policy table for the idempotency gate.

Which routes are idempotency-sensitive is declared once, at startup, in an
explicit table keyed by HTTP method and route path template. At request time
the ASGI adapter asks the application router which route matches, then looks
the template up in the table.

Examples:
    Building the table::

        from lms_core.models import IdempotencyPolicy
        from lms_core.routing import RoutePolicyTable

        policies = RoutePolicyTable()
        policies.register("POST", "/api/courses")
        policies.register("POST", "/api/enrollments", IdempotencyPolicy.OPTIONAL)

    Looking up a policy::

        policies.lookup("post", "/api/courses")
        # IdempotencyPolicy.REQUIRED
"""

from collections.abc import Iterable, Mapping
from typing import Any

from starlette.routing import BaseRoute, Match

from lms_core.models import IdempotencyPolicy


class RoutePolicyTable:
    """Mapping of (METHOD, path template) to IdempotencyPolicy."""

    def __init__(
        self,
        policies: Mapping[tuple[str, str], IdempotencyPolicy] | None = None,
    ) -> None:
        """Initialize the table, optionally pre-populated.

        Args:
            policies: Initial entries keyed by (method, path template)
        """
        self._policies: dict[tuple[str, str], IdempotencyPolicy] = {}
        for (method, path), policy in (policies or {}).items():
            self.register(method, path, policy)

    def register(
        self,
        method: str,
        path: str,
        policy: IdempotencyPolicy = IdempotencyPolicy.REQUIRED,
    ) -> None:
        """Declare a route as idempotency-sensitive.

        Args:
            method: HTTP method, any case
            path: Route path template exactly as declared, e.g. "/api/courses"
            policy: REQUIRED (default) or OPTIONAL
        """
        self._policies[(method.upper(), path)] = IdempotencyPolicy(policy)

    def lookup(self, method: str, path: str) -> IdempotencyPolicy | None:
        """Return the policy for a route template, or None if not registered."""
        return self._policies.get((method.upper(), path))

    def resolve(
        self,
        scope: dict[str, Any],
        routes: Iterable[BaseRoute],
    ) -> IdempotencyPolicy | None:
        """Find the policy for the route that fully matches an ASGI scope.

        Args:
            scope: The ASGI HTTP scope
            routes: The application's routes, in matching order

        Returns:
            The registered policy, or None if no route matches or the
            matching route is not registered.
        """
        for route in routes:
            match, _ = route.matches(scope)
            if match == Match.FULL:
                path = getattr(route, "path", None)
                if path is None:
                    return None
                return self.lookup(scope["method"], path)

        return None

    def __len__(self) -> int:
        return len(self._policies)

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        method, path = item
        return (str(method).upper(), path) in self._policies
