"""Distributors and permission resolution.

A distributor owns ordered include and exclude region patterns and may
inherit from a parent distributor.  Resolution for a location follows a
fixed order at every node:

1. an unresolved (``None``) location is denied;
2. any matching exclude denies, and the parent is never consulted;
3. any matching include allows;
4. otherwise the parent resolves the location from scratch;
5. with no parent left, the location is denied.

Distributors are built in two phases.  :class:`DistributorBuilder` is
mutable and accepts ``add_include``/``add_exclude``; ``freeze()`` returns
an immutable :class:`Distributor` that is safe to share between threads.
A builder's parent must already be frozen, so a hierarchy built this way
cannot contain a cycle.

Example
-------
::

    country = DistributorBuilder("DISTRIBUTOR1").add_include("india").freeze()
    regional = (
        DistributorBuilder("DISTRIBUTOR2", parent=country)
        .add_exclude("tamilnadu-india")
        .freeze()
    )
    regional.has_permission(location)
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from distributor_permissions.locations.location import Location
from distributor_permissions.regions.matcher import MatchMode, RegionMatcher
from distributor_permissions.regions.pattern import RegionPattern

logger = logging.getLogger(__name__)


class CyclicHierarchyError(ValueError):
    """Raised when a parent chain visits the same distributor twice.

    Attributes
    ----------
    cycle:
        Distributor names along the offending chain, ending with the
        repeated name.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Cyclic distributor hierarchy: {' -> '.join(cycle)}")


# ---------------------------------------------------------------------------
# PermissionDecision
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PermissionDecision:
    """Immutable outcome of a permission check.

    Attributes
    ----------
    allowed:
        Whether the distributor may operate at the location.
    reason:
        Human-readable explanation of the outcome.
    distributor:
        Name of the distributor whose rule decided, or ``None`` when the
        default deny applied.
    matched_pattern:
        The pattern that decided, or ``None`` for a default deny.
    chain:
        Names of the distributors consulted, in order.
    """

    allowed: bool
    reason: str
    distributor: str | None = None
    matched_pattern: str | None = None
    chain: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        """Return True if permission is granted."""
        return self.allowed


# ---------------------------------------------------------------------------
# Distributor
# ---------------------------------------------------------------------------


class Distributor:
    """Frozen permission resolver for one node of the hierarchy.

    Parameters
    ----------
    name:
        Identifier of the distributor.
    includes:
        Region patterns granting permission.
    excludes:
        Region patterns revoking permission.  Checked before includes.
    parent:
        Optional frozen distributor consulted when no local rule matches.
    matcher:
        Region matcher for this node's rules.  Defaults to the parent's
        matcher, or positional matching at the root.
    """

    def __init__(
        self,
        name: str,
        includes: Iterable[str | RegionPattern] = (),
        excludes: Iterable[str | RegionPattern] = (),
        parent: Distributor | None = None,
        matcher: RegionMatcher | None = None,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Distributor name must be a non-empty string.")
        if parent is not None and not isinstance(parent, Distributor):
            raise TypeError(
                f"Distributor parent must be a frozen Distributor, got {type(parent).__name__}"
            )
        self._name = name
        self._includes: tuple[RegionPattern, ...] = tuple(
            RegionPattern.parse(p) for p in includes
        )
        self._excludes: tuple[RegionPattern, ...] = tuple(
            RegionPattern.parse(p) for p in excludes
        )
        self._parent = parent
        if matcher is None:
            matcher = parent.matcher if parent is not None else RegionMatcher()
        self._matcher = matcher

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def includes(self) -> tuple[RegionPattern, ...]:
        return self._includes

    @property
    def excludes(self) -> tuple[RegionPattern, ...]:
        return self._excludes

    @property
    def parent(self) -> Distributor | None:
        return self._parent

    @property
    def matcher(self) -> RegionMatcher:
        return self._matcher

    @property
    def match_mode(self) -> MatchMode:
        return self._matcher.mode

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def has_permission(self, location: Location | None) -> bool:
        """Return True if this distributor may operate at *location*."""
        return self.explain(location).allowed

    def explain(self, location: Location | None) -> PermissionDecision:
        """Resolve *location* and report which rule decided.

        Raises
        ------
        CyclicHierarchyError
            If the parent chain loops back on itself.
        """
        if location is None:
            logger.debug("Permission DENY: distributor=%s location=<unresolved>", self._name)
            return PermissionDecision(
                allowed=False,
                reason="Location is unresolved; default policy: deny.",
                chain=(self._name,),
            )

        chain: list[str] = []
        visited: set[int] = set()
        node: Distributor | None = self
        while node is not None:
            if id(node) in visited:
                raise CyclicHierarchyError(chain + [node.name])
            visited.add(id(node))
            chain.append(node.name)

            excluded = node._first_match(location, node._excludes)
            if excluded is not None:
                logger.debug(
                    "Permission DENY: distributor=%s location=%s exclude=%s via=%s",
                    self._name,
                    location,
                    excluded,
                    node.name,
                )
                return PermissionDecision(
                    allowed=False,
                    reason=f"Excluded by '{excluded}' on {node.name}.",
                    distributor=node.name,
                    matched_pattern=excluded.raw,
                    chain=tuple(chain),
                )

            included = node._first_match(location, node._includes)
            if included is not None:
                logger.debug(
                    "Permission ALLOW: distributor=%s location=%s include=%s via=%s",
                    self._name,
                    location,
                    included,
                    node.name,
                )
                return PermissionDecision(
                    allowed=True,
                    reason=f"Included by '{included}' on {node.name}.",
                    distributor=node.name,
                    matched_pattern=included.raw,
                    chain=tuple(chain),
                )

            node = node._parent

        logger.debug(
            "Permission DEFAULT-DENY: distributor=%s location=%s", self._name, location
        )
        return PermissionDecision(
            allowed=False,
            reason=f"No rule in {' -> '.join(chain)} matches {location}; default policy: deny.",
            chain=tuple(chain),
        )

    def check_all(self, locations: Iterable[Location | None]) -> list[bool]:
        """Return one permission verdict per location, in order."""
        return [self.has_permission(location) for location in locations]

    def ancestors(self) -> list[str]:
        """Return the names of the parent chain, nearest first."""
        names: list[str] = []
        visited = {id(self)}
        node = self._parent
        while node is not None:
            if id(node) in visited:
                raise CyclicHierarchyError([self._name] + names + [node.name])
            visited.add(id(node))
            names.append(node.name)
            node = node._parent
        return names

    def summary(self) -> dict[str, object]:
        """Return a plain dict describing this distributor."""
        return {
            "name": self._name,
            "parent": self._parent.name if self._parent is not None else None,
            "match_mode": self._matcher.mode.value,
            "includes": [p.raw for p in self._includes],
            "excludes": [p.raw for p in self._excludes],
        }

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _first_match(
        self,
        location: Location,
        patterns: tuple[RegionPattern, ...],
    ) -> RegionPattern | None:
        for pattern in patterns:
            if self._matcher.matches(location, pattern):
                return pattern
        return None

    def __repr__(self) -> str:
        parent = self._parent.name if self._parent is not None else None
        return (
            f"Distributor(name={self._name!r}, parent={parent!r}, "
            f"includes={len(self._includes)}, excludes={len(self._excludes)})"
        )


# ---------------------------------------------------------------------------
# DistributorBuilder
# ---------------------------------------------------------------------------


class DistributorBuilder:
    """Mutable staging area for a distributor's rules.

    Rules are appended in call order with no de-duplication.  Patterns are
    validated as they are added.  Call :meth:`freeze` to obtain the
    immutable :class:`Distributor`.

    Parameters
    ----------
    name:
        Identifier of the distributor.
    parent:
        Optional frozen parent distributor.
    matcher:
        Optional region matcher; see :class:`Distributor`.
    """

    def __init__(
        self,
        name: str,
        parent: Distributor | None = None,
        matcher: RegionMatcher | None = None,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Distributor name must be a non-empty string.")
        if parent is not None and not isinstance(parent, Distributor):
            raise TypeError(
                "Distributor parent must be frozen before it is used; "
                f"got {type(parent).__name__}"
            )
        self._name = name
        self._parent = parent
        self._matcher = matcher
        self._includes: list[RegionPattern] = []
        self._excludes: list[RegionPattern] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def includes(self) -> tuple[RegionPattern, ...]:
        return tuple(self._includes)

    @property
    def excludes(self) -> tuple[RegionPattern, ...]:
        return tuple(self._excludes)

    def add_include(self, pattern: str | RegionPattern) -> DistributorBuilder:
        """Append a pattern that grants permission.

        Raises
        ------
        MalformedPatternError
            If *pattern* is blank or has more than three segments.
        """
        self._includes.append(RegionPattern.parse(pattern))
        return self

    def add_exclude(self, pattern: str | RegionPattern) -> DistributorBuilder:
        """Append a pattern that revokes permission.

        Raises
        ------
        MalformedPatternError
            If *pattern* is blank or has more than three segments.
        """
        self._excludes.append(RegionPattern.parse(pattern))
        return self

    def freeze(self) -> Distributor:
        """Return an immutable :class:`Distributor` with the current rules.

        The builder stays usable; later additions do not affect
        distributors already frozen from it.
        """
        distributor = Distributor(
            name=self._name,
            includes=self._includes,
            excludes=self._excludes,
            parent=self._parent,
            matcher=self._matcher,
        )
        logger.debug(
            "Froze distributor %s (%d includes, %d excludes)",
            self._name,
            len(self._includes),
            len(self._excludes),
        )
        return distributor

    def __repr__(self) -> str:
        return f"DistributorBuilder(name={self._name!r})"
