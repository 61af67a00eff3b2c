# entities/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any,
    ClassVar,
    Dict,
    Generic,
    Iterator,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
)

T = TypeVar("T")
TEntity = TypeVar("TEntity", bound="Entity")


class Field(Generic[T]):
    """
    Read-only descriptor mapping an attribute to a key in `entity.data`.

    A key missing from `data` reads as `default` (None unless given); use
    `"name" in entity` to tell an absent field from an empty one.

    Example:
        title: Optional[str] = Field("title")
    """

    def __init__(
        self,
        key: Optional[str] = None,
        *,
        default: Optional[T] = None,
    ) -> None:
        self.key = key
        self.default = default
        self.name: Optional[str] = None

    def __set_name__(self, owner, name: str) -> None:
        if self.key is None:
            self.key = name
        self.name = name
        keys = owner.__dict__.get("_field_keys")
        if keys is None:
            keys = dict(getattr(owner, "_field_keys", {}))
            owner._field_keys = keys
        keys[name] = self.key

    def __get__(self, instance, owner=None) -> T:
        if instance is None:
            return self

        key = self.key
        assert key is not None

        if key in instance.data:
            return instance.data[key]
        return self.default

    def __set__(self, instance, value: T) -> None:
        raise AttributeError(f"Field '{self.name}' is read-only")


class Entity:
    """
    Immutable view over one normalized content entry.

    All attributes are thin accessors over `self.data`; keys with no
    declared Field are kept as-is and exposed through `extra`.
    """

    _field_keys: ClassVar[Dict[str, str]] = {}

    id: Optional[str] = Field("id")
    created_at: Optional[str] = Field("createdAt")
    updated_at: Optional[str] = Field("updatedAt")

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> None:
        merged = dict(data or {})
        merged.update(fields)
        merged.setdefault("id", None)
        object.__setattr__(self, "_data", MappingProxyType(merged))

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    @property
    def extra(self) -> Dict[str, Any]:
        """Keys not promoted to a declared Field."""
        known = set(self._field_keys.values())
        return {k: v for k, v in self._data.items() if k not in known}

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __contains__(self, name: str) -> bool:
        """True when the field (attribute or raw key) is present."""
        return self._field_keys.get(name, name) in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested dict, absent fields omitted."""
        return {k: _plain(v) for k, v in self._data.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return type(self) is type(other) and dict(self._data) == dict(other._data)

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

    # ------------------------------------------------------------------ #
    # Representation / display helpers
    # ------------------------------------------------------------------ #

    def __repr__(self) -> str:
        """Short, machine-oriented representation."""
        return f"<{type(self).__name__} id='{self.id}'>"

    def __str__(self) -> str:
        """Compact human-oriented summary."""
        label = self._data.get("title") or self._data.get("name") or self._data.get("slug")
        if label:
            return f"{type(self).__name__}(id='{self.id}', {label!r})"
        return f"{type(self).__name__}(id='{self.id}')"


def _plain(value: Any) -> Any:
    if isinstance(value, Entity):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class EntityCollection(Generic[TEntity]):
    """
    One fetched page of entities.

    `total` is the backend's full match count and may exceed `len(items)`
    when a limit truncated the page.
    """

    items: Tuple[TEntity, ...] = field(default_factory=tuple)
    total: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[TEntity]:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]
