"""Name-keyed registry of frozen distributors.

A :class:`DistributorRegistry` holds a whole hierarchy.  Parents are
referenced by name in configuration, so the registry validates that
every parent exists and that no chain of parents loops back on itself
before freezing anything.

Schema
------
::

    version: "1"
    match_mode: positional          # or country_anchored
    distributors:
      - name: DISTRIBUTOR1
        include: [india, unitedstates]
        exclude: [karnataka-india, chennai-tamilnadu-india]
      - name: DISTRIBUTOR2
        parent: DISTRIBUTOR1
        include: [india]
        exclude: [tamilnadu-india]

Example
-------
::

    registry = DistributorRegistry.load("distributors.yaml")
    registry.has_permission("DISTRIBUTOR2", location)
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import yaml

from distributor_permissions.distributors.distributor import (
    CyclicHierarchyError,
    Distributor,
    PermissionDecision,
)
from distributor_permissions.locations.location import Location
from distributor_permissions.regions.matcher import MatchMode, RegionMatcher
from distributor_permissions.regions.pattern import MalformedPatternError

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1", "1.0"])


class RegistryConfigError(ValueError):
    """Raised when a distributor configuration is malformed.

    Attributes
    ----------
    config_path:
        The source the configuration came from, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class DistributorRegistry:
    """Collection of frozen distributors keyed by unique name.

    Parameters
    ----------
    distributors:
        Frozen distributors to register.  Every parent must be registered
        too, either earlier in the iterable or already present.
    """

    def __init__(self, distributors: list[Distributor] | None = None) -> None:
        self._distributors: dict[str, Distributor] = {}
        for distributor in distributors or []:
            self.register(distributor)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(
        cls,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> DistributorRegistry:
        """Build a registry from an already-parsed configuration mapping.

        Raises
        ------
        RegistryConfigError
            On bad structure, unsupported version, duplicate names,
            unknown parents or malformed patterns.
        CyclicHierarchyError
            If parent references form a cycle.
        """
        if not isinstance(config, dict):
            raise RegistryConfigError(
                "Distributor config must be a mapping (dict).", config_path
            )

        version = str(config.get("version", "1"))
        if version not in _SUPPORTED_VERSIONS:
            raise RegistryConfigError(
                f"Unsupported config version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        try:
            matcher = RegionMatcher(config.get("match_mode", MatchMode.POSITIONAL))  # type: ignore[arg-type]
        except ValueError as exc:
            raise RegistryConfigError(
                f"Unknown match_mode {config.get('match_mode')!r}. "
                f"Valid: {[m.value for m in MatchMode]}.",
                config_path,
            ) from exc

        raw_entries = config.get("distributors", [])
        if not isinstance(raw_entries, list):
            raise RegistryConfigError(
                "Distributor config 'distributors' must be a list.", config_path
            )

        entries: dict[str, dict[str, object]] = {}
        for index, raw in enumerate(raw_entries):
            if not isinstance(raw, dict):
                raise RegistryConfigError(
                    f"Distributor at index {index} must be a mapping.", config_path
                )
            name = str(raw.get("name", "")).strip()
            if not name:
                raise RegistryConfigError(
                    f"Distributor at index {index} has no name.", config_path
                )
            if name in entries:
                raise RegistryConfigError(f"Duplicate distributor name {name!r}.", config_path)
            entries[name] = raw

        for name, raw in entries.items():
            parent = _parent_name(raw)
            if parent is not None and parent not in entries:
                raise RegistryConfigError(
                    f"Distributor {name!r} references unknown parent {parent!r}.",
                    config_path,
                )

        _check_acyclic(entries)

        registry = cls()
        for name in entries:
            registry._build(name, entries, matcher, config_path)

        logger.info(
            "Loaded %d distributors from %s (match_mode=%s)",
            len(registry),
            config_path or "<dict>",
            matcher.mode.value,
        )
        return registry

    @classmethod
    def from_yaml_string(
        cls,
        yaml_string: str,
        config_path: str | None = None,
    ) -> DistributorRegistry:
        """Build a registry from YAML text."""
        try:
            raw = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise RegistryConfigError(f"Failed to parse YAML: {exc}", config_path) from exc
        return cls.from_dict(raw, config_path=config_path)

    @classmethod
    def load(cls, config_path: str | Path) -> DistributorRegistry:
        """Build a registry from a YAML file on disk.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Distributor config not found: {config_path}")
        with config_path.open("r", encoding="utf-8") as fh:
            text = fh.read()
        return cls.from_yaml_string(text, config_path=str(config_path))

    def register(self, distributor: Distributor) -> None:
        """Add a frozen distributor.

        Raises
        ------
        RegistryConfigError
            If the name is taken or the parent is not registered.
        """
        if distributor.name in self._distributors:
            raise RegistryConfigError(f"Duplicate distributor name {distributor.name!r}.")
        parent = distributor.parent
        if parent is not None and self._distributors.get(parent.name) is not parent:
            raise RegistryConfigError(
                f"Parent {parent.name!r} of {distributor.name!r} is not registered."
            )
        self._distributors[distributor.name] = distributor

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, name: str) -> Distributor:
        """Return the distributor called *name*.

        Raises
        ------
        KeyError
            If no such distributor is registered.
        """
        try:
            return self._distributors[name]
        except KeyError:
            raise KeyError(f"Unknown distributor {name!r}") from None

    def names(self) -> list[str]:
        """Return registered names in registration order."""
        return list(self._distributors)

    def has_permission(self, name: str, location: Location | None) -> bool:
        return self.get(name).has_permission(location)

    def explain(self, name: str, location: Location | None) -> PermissionDecision:
        return self.get(name).explain(location)

    def __contains__(self, name: object) -> bool:
        return name in self._distributors

    def __len__(self) -> int:
        return len(self._distributors)

    def __iter__(self) -> Iterator[Distributor]:
        return iter(self._distributors.values())

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build(
        self,
        name: str,
        entries: dict[str, dict[str, object]],
        matcher: RegionMatcher,
        config_path: str | None,
    ) -> Distributor:
        """Freeze *name*, freezing its ancestors first."""
        pending: list[str] = []
        current: str | None = name
        while current is not None and current not in self._distributors:
            pending.append(current)
            current = _parent_name(entries[current])

        for pending_name in reversed(pending):
            raw = entries[pending_name]
            parent_name = _parent_name(raw)
            try:
                distributor = Distributor(
                    name=pending_name,
                    includes=_pattern_list(raw, "include"),
                    excludes=_pattern_list(raw, "exclude"),
                    parent=self._distributors[parent_name] if parent_name is not None else None,
                    matcher=matcher,
                )
            except (MalformedPatternError, TypeError) as exc:
                raise RegistryConfigError(
                    f"Error in distributor {pending_name!r}: {exc}", config_path
                ) from exc
            self._distributors[pending_name] = distributor
        return self._distributors[name]


def _parent_name(raw: dict[str, object]) -> str | None:
    """Parent reference trimmed the same way as distributor names; blank means none."""
    parent = raw.get("parent")
    if parent is None:
        return None
    return str(parent).strip() or None


def _pattern_list(raw: dict[str, object], key: str) -> list[str]:
    value = raw.get(key, [])
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list of region patterns")
    return value


def _check_acyclic(entries: dict[str, dict[str, object]]) -> None:
    """Raise CyclicHierarchyError if any parent chain revisits a name."""
    safe: set[str] = set()
    for name in entries:
        path: list[str] = []
        seen: set[str] = set()
        current: str | None = name
        while current is not None and current not in safe:
            if current in seen:
                raise CyclicHierarchyError(path + [current])
            seen.add(current)
            path.append(current)
            current = _parent_name(entries[current])
        safe.update(path)
