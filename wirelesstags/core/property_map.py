"""Schema-driven property mapping.

A schema maps logical property names onto keys of an entity's raw attribute
store (the JSON record returned by the cloud API), with optional transforms
in either direction. Entities mix in ``MappedPropertiesMixin`` and bind one
or more schemas; reading or writing a bound name then goes straight through
to the raw store, so a refreshed store is visible immediately.

Transform calling conventions:

* ``get(raw, owner)`` for properties with a source key,
* ``get(owner)`` for properties without one (synthesized values),
* ``set(value, owner)`` returning the raw value to store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union

from ..const import EVENT_UPDATE

_LOGGER = logging.getLogger(__name__)

Getter = Callable[..., Any]
Setter = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class PropertySpec:
    """How one logical property binds to the raw store.

    Without ``get`` the property is write-only, without ``set`` read-only.
    """

    source_key: Optional[str] = None
    get: Optional[Getter] = None
    set: Optional[Setter] = None

    def __post_init__(self) -> None:
        if self.get is None and self.set is None:
            raise ValueError(f"property bound to {self.source_key!r} needs a getter or a setter")


Schema = Mapping[str, PropertySpec]
SchemaTable = Mapping[str, Union[Schema, str]]


def resolve_schema(schemas: SchemaTable, key: str) -> Schema:
    """Return the schema registered under ``key``, following one alias.

    An entry that is a string names the entry it aliases. Keys without an
    entry resolve to an empty schema.

    Raises:
        ValueError: If an alias refers to itself or to another alias
    """
    entry = schemas.get(key)
    if isinstance(entry, str):
        if entry == key:
            raise ValueError(f"schema entry {key!r} is aliased to itself")
        target = schemas.get(entry)
        if isinstance(target, str):
            raise ValueError(f"schema alias {key!r} -> {entry!r} points to another alias")
        entry = target
    return entry or {}


def store_of(owner: Any) -> Dict[str, Any]:
    """Return the raw attribute store of a mapped entity."""
    return getattr(owner, getattr(owner, "_store_attr", "data"))


def _mark(owner: Any, *keys: Optional[str]) -> None:
    mark_modified = getattr(owner, "mark_modified", None)
    if not callable(mark_modified):
        return
    for key in keys:
        if key is not None:
            mark_modified(key)


def read_property(owner: Any, spec: PropertySpec) -> Any:
    """Read a mapped property through its getter transform."""
    if spec.source_key is None:
        return spec.get(owner)
    return spec.get(store_of(owner).get(spec.source_key), owner)


def write_property(owner: Any, name: str, spec: PropertySpec, value: Any) -> Any:
    """Write a mapped property through its setter transform.

    Marks both the property name and its raw key as modified on hosts that
    track modifications, and emits an ``update`` event on hosts that emit.
    """
    raw = spec.set(value, owner)
    if spec.source_key is not None:
        store_of(owner)[spec.source_key] = raw
    _mark(owner, name, spec.source_key)
    emit = getattr(owner, "emit", None)
    if callable(emit):
        emit(EVENT_UPDATE, owner, name, value, raw)
    return raw


class MappedGroup:
    """Sealed sub-object whose fields map onto keys of its owner's store.

    Used for compound settings such as thresholds or notification settings.
    Writing a field marks both the raw key and ``<group>.<field>`` modified.
    """

    __slots__ = ("_owner", "_name", "_key_map", "_transforms")

    def __init__(
        self,
        owner: Any,
        name: Optional[str],
        key_map: Mapping[str, str],
        transforms: Optional[Mapping[str, tuple]] = None,
    ) -> None:
        object.__setattr__(self, "_owner", owner)
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_key_map", key_map)
        object.__setattr__(self, "_transforms", transforms or {})

    def __getattr__(self, field: str) -> Any:
        key_map = object.__getattribute__(self, "_key_map")
        if field not in key_map:
            raise AttributeError(f"{self._name or 'group'} has no field {field!r}")
        raw = store_of(self._owner).get(key_map[field])
        transform = self._transforms.get(field)
        return transform[0](raw, self._owner) if transform else raw

    def __setattr__(self, field: str, value: Any) -> None:
        if field not in self._key_map:
            raise AttributeError(f"cannot add field {field!r} to {self._name or 'group'}")
        transform = self._transforms.get(field)
        raw = transform[1](value, self._owner) if transform else value
        key = self._key_map[field]
        store_of(self._owner)[key] = raw
        _mark(self._owner, key, f"{self._name}.{field}" if self._name else field)

    def __iter__(self) -> Iterator[str]:
        return iter(self._key_map)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, MappedGroup):
            return self.as_dict() == other.as_dict()
        if isinstance(other, Mapping):
            return self.as_dict() == dict(other)
        return NotImplemented

    __hash__ = None

    def keys(self):
        return self._key_map.keys()

    def raw_keys(self):
        return self._key_map.values()

    def as_dict(self) -> Dict[str, Any]:
        return {field: getattr(self, field) for field in self._key_map}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self.as_dict()!r})"


class MappedPropertiesMixin:
    """Exposes schema-bound properties as plain attributes.

    Subclasses set ``_store_attr`` to the name of the attribute holding the
    raw store. Binding the same name twice overlays the earlier binding.
    """

    _store_attr = "data"

    def __init__(self, *args, **kwargs) -> None:
        object.__setattr__(self, "_bindings", {})
        super().__init__(*args, **kwargs)

    def bind_properties(self, schemas: SchemaTable, key: str) -> None:
        """Bind every property of the schema resolved for ``key``."""
        for name, spec in resolve_schema(schemas, key).items():
            self.bind_property(name, spec)

    def bind_property(self, name: str, spec: PropertySpec) -> None:
        if hasattr(type(self), name) or name.startswith("_"):
            raise ValueError(f"{name!r} cannot be bound on {type(self).__name__}")
        self.__dict__["_bindings"][name] = spec
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Bound %s.%s to %r", type(self).__name__, name, spec.source_key)

    def property_spec(self, name: str) -> Optional[PropertySpec]:
        return self.__dict__["_bindings"].get(name)

    def mapped_property_names(self) -> list:
        return list(self.__dict__["_bindings"])

    def mapped_values(self) -> Dict[str, Any]:
        """Readable mapped properties as a plain dict, groups expanded."""
        values = {}
        for name, spec in self.__dict__["_bindings"].items():
            if spec.get is None:
                continue
            value = read_property(self, spec)
            values[name] = value.as_dict() if isinstance(value, MappedGroup) else value
        return values

    def __getattr__(self, name: str) -> Any:
        bindings = self.__dict__.get("_bindings")
        spec = bindings.get(name) if bindings else None
        if spec is None:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        if spec.get is None:
            raise AttributeError(f"{name!r} is write-only")
        return read_property(self, spec)

    def __setattr__(self, name: str, value: Any) -> None:
        bindings = self.__dict__.get("_bindings")
        spec = bindings.get(name) if bindings else None
        if spec is None:
            object.__setattr__(self, name, value)
            return
        if spec.set is None:
            raise AttributeError(f"{name!r} is read-only")
        write_property(self, name, spec, value)
