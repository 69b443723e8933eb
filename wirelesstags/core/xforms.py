"""Value transforms used by the property schemas."""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..const import UNIT_FAHRENHEIT
from .property_map import MappedGroup, PropertySpec

# Magnus formula coefficients
_DEW_POINT_B = 17.67
_DEW_POINT_C = 243.5


def identity(value: Any, owner: Any = None) -> Any:
    return value


def round_prec(value: Optional[float], digits: int) -> Optional[float]:
    if value is None:
        return None
    return round(value, digits)


def rounding(digits: int) -> Callable[..., Optional[float]]:
    """Getter transform rounding the raw value to ``digits`` decimals."""

    def _round(value: Optional[float], owner: Any = None) -> Optional[float]:
        return round_prec(value, digits)

    return _round


def enum_lookup(table: Mapping[Any, str]) -> Callable[..., Optional[str]]:
    """Getter transform mapping a raw code to its label.

    Unknown codes read as None.
    """

    def _lookup(code: Any, owner: Any = None) -> Optional[str]:
        return table.get(code)

    return _lookup


def _loosely_equal(value: Any, label: Any) -> bool:
    if value == label:
        return True
    # numeric strings match numbers: "240" finds 240
    if isinstance(value, bool) or isinstance(label, bool):
        return False
    if isinstance(value, (int, float)) and isinstance(label, str):
        value, label = label, value
    if isinstance(value, str) and isinstance(label, (int, float)):
        try:
            return float(value.strip() or 0) == label
        except ValueError:
            return False
    return False


def reverse_enum_lookup(table: Mapping[Any, str]) -> Callable[..., Any]:
    """Setter transform mapping a label back to its raw code.

    The first code whose label loosely equals the given one wins; numeric
    strings and numbers compare by value, so ``"240"`` matches ``240``.

    Raises:
        ValueError: If the label is not in the table
    """

    def _reverse(label: Any, owner: Any = None) -> Any:
        for code, value in table.items():
            if _loosely_equal(value, label):
                return code
        raise ValueError(f"{label!r} is not one of {list(table.values())}")

    return _reverse


def enum_values(table: Mapping[Any, str]) -> Callable[..., List[str]]:
    """Synthesized getter returning the table's labels in table order."""

    def _values(owner: Any = None) -> List[str]:
        return list(table.values())

    return _values


def celsius_to_fahrenheit(value: Optional[float], is_delta: bool = False) -> Optional[float]:
    if value is None:
        return None
    return value * 9 / 5 if is_delta else value * 9 / 5 + 32


def fahrenheit_to_celsius(value: Optional[float], is_delta: bool = False) -> Optional[float]:
    if value is None:
        return None
    return value * 5 / 9 if is_delta else (value - 32) * 5 / 9


def _configured_unit(owner: Any) -> Optional[str]:
    monitoring_config = getattr(owner, "monitoring_config", None)
    if callable(monitoring_config):
        return monitoring_config().unit
    return getattr(owner, "unit", None)


def from_native_temp(is_delta: bool = False) -> Callable[..., Optional[float]]:
    """Getter transform converting native Celsius to the configured unit.

    The unit is looked up on each call, so a unit change applies to the
    next read.
    """

    def _from_native(value: Optional[float], owner: Any = None) -> Optional[float]:
        if _configured_unit(owner) == UNIT_FAHRENHEIT:
            return celsius_to_fahrenheit(value, is_delta)
        return value

    return _from_native


def to_native_temp(is_delta: bool = False) -> Callable[..., Optional[float]]:
    """Setter transform converting the configured unit to native Celsius."""

    def _to_native(value: Optional[float], owner: Any = None) -> Optional[float]:
        if _configured_unit(owner) == UNIT_FAHRENHEIT:
            return fahrenheit_to_celsius(value, is_delta)
        return value

    return _to_native


class GroupedSubObject:
    """Synthesized getter building a ``MappedGroup`` once per owner.

    The group is cached on the owner under the bound property name, so
    repeated reads return the same object.
    """

    __slots__ = ("name", "key_map", "transforms")

    def __init__(
        self,
        name: str,
        key_map: Mapping[str, str],
        transforms: Optional[Mapping[str, tuple]] = None,
    ) -> None:
        self.name = name
        self.key_map = dict(key_map)
        self.transforms = dict(transforms or {})

    def __call__(self, owner: Any) -> MappedGroup:
        cache: Dict[str, MappedGroup] = owner.__dict__.setdefault("_group_cache", {})
        group = cache.get(self.name)
        if group is None:
            group = MappedGroup(owner, self.name, self.key_map, self.transforms)
            cache[self.name] = group
        return group

    def leaf_ids(self) -> List[str]:
        return [f"{self.name}.{field}" for field in self.key_map]


def grouped_sub_object(
    name: str,
    key_map: Mapping[str, str],
    transforms: Optional[Mapping[str, tuple]] = None,
) -> PropertySpec:
    """Read-only property exposing a group of raw keys as one sub-object."""
    return PropertySpec(None, GroupedSubObject(name, key_map, transforms))


def delegating_accessor(target: Any, name: str) -> PropertySpec:
    """Property passing reads and writes through to ``target.name``."""

    def _get(owner: Any = None) -> Any:
        return getattr(target, name)

    def _set(value: Any, owner: Any = None) -> Any:
        setattr(target, name, value)
        return value

    return PropertySpec(None, _get, _set)


def rh_to_dew_point(humidity: Optional[float], owner: Any = None) -> Optional[float]:
    """Dew point in degrees Celsius from relative humidity.

    Uses the tag's current temperature reading, which the cloud reports in
    Celsius.
    """
    if humidity is None or humidity <= 0 or owner is None:
        return None
    temperature = owner.wireless_tag.data.get("temperature")
    if temperature is None:
        return None
    m = math.log(humidity / 100) + _DEW_POINT_B * temperature / (_DEW_POINT_C + temperature)
    return _DEW_POINT_C * m / (_DEW_POINT_B - m)
