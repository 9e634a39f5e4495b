"""Declared attribute schema and the attribute store it backs.

The attribute names below are the wire contract with the surrounding
declarative tool and must stay stable.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol, TypeAlias, runtime_checkable

AttributeType: TypeAlias = Literal["int", "str", "bool"]

_PYTHON_TYPES: dict[str, type] = {"int": int, "str": str, "bool": bool}


@dataclass(frozen=True, slots=True)
class Attribute:
    name: str
    type: AttributeType
    description: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None

    @property
    def is_output(self) -> bool:
        """Computed-only: set by the provider, never declared by the user."""
        return self.computed and not (self.required or self.optional)

    def zero(self) -> Any:
        return _PYTHON_TYPES[self.type]()


def _schema(*attrs: Attribute) -> dict[str, Attribute]:
    return {a.name: a for a in attrs}


CLUSTER_SCHEMA: Mapping[str, Attribute] = _schema(
    Attribute("cluster_id", "int", "Cluster id", computed=True),
    Attribute("name", "str", "Cluster name", required=True, force_new=True),
    Attribute("region", "str", "Region to use", required=True, force_new=True),
    Attribute("node_count", "int", "Node count", required=True, force_new=True),
    Attribute(
        "user_api_interface", "str", "Type of API interface, either CQL or ALTERNATOR",
        optional=True, force_new=True, default="CQL",
    ),
    Attribute(
        "alternator_write_isolation", "str", "Default write isolation policy",
        optional=True, force_new=True, default="only_rmw_uses_lwt",
    ),
    Attribute("node_type", "str", "Instance type of a node", required=True, force_new=True),
    Attribute(
        "cidr_block", "str", "IPv4 CIDR of the cluster",
        optional=True, computed=True, force_new=True,
    ),
    Attribute(
        "scylla_version", "str", "Scylla version",
        optional=True, computed=True, force_new=True,
    ),
    Attribute(
        "enable_vpc_peering", "bool", "Whether to enable VPC peering",
        optional=True, force_new=True, default=True,
    ),
    # Not force-new: the cluster API rejects every update anyway.
    Attribute(
        "enable_dns", "bool", "Whether to enable CNAME for seed nodes",
        optional=True, default=True,
    ),
    Attribute("request_id", "int", "Cluster creation request ID", computed=True),
    Attribute("datacenter", "str", "Cluster datacenter name", computed=True),
    Attribute("status", "str", "Cluster status", computed=True),
)


@runtime_checkable
class ResourceData(Protocol):
    """Attribute store owned by the declarative tool."""

    @property
    def id(self) -> str: ...

    def set_id(self, value: str) -> None: ...

    def get(self, name: str) -> Any: ...

    def get_ok(self, name: str) -> tuple[Any, bool]: ...

    def set(self, name: str, value: Any) -> None: ...


class MemoryResourceData:
    """In-memory ResourceData backed by a schema.

    `get` falls back to the schema default, then to the type's zero value.
    `get_ok` reports whether the attribute holds a non-zero value.
    """

    def __init__(
        self,
        schema: Mapping[str, Attribute],
        values: Mapping[str, Any] | None = None,
        id: str = "",
        prior: Mapping[str, Any] | None = None,
    ) -> None:
        self._schema = schema
        self._values: dict[str, Any] = {}
        self._id = id
        self._prior = dict(prior or {})
        for name, value in (values or {}).items():
            self.set(name, value)

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value

    def _attribute(self, name: str) -> Attribute:
        try:
            return self._schema[name]
        except KeyError:
            raise KeyError(f"Unknown attribute '{name}'") from None

    def get(self, name: str) -> Any:
        attr = self._attribute(name)
        if name in self._values:
            return self._values[name]
        if attr.default is not None:
            return attr.default
        return attr.zero()

    def get_ok(self, name: str) -> tuple[Any, bool]:
        value = self.get(name)
        return value, value != self._attribute(name).zero()

    def set(self, name: str, value: Any) -> None:
        attr = self._attribute(name)
        if value is None:
            self._values.pop(name, None)
            return
        expected = _PYTHON_TYPES[attr.type]
        # bool is an int subclass; keep the two apart.
        if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
            raise TypeError(f"Attribute '{name}' expects {attr.type}, got {type(value).__name__}")
        self._values[name] = value

    def changed(self) -> list[str]:
        """Declared attributes whose value differs from the prior state."""
        return [
            name for name, attr in self._schema.items()
            if not attr.is_output and name in self._prior and self._prior[name] != self.get(name)
        ]

    def state(self) -> dict[str, Any]:
        return {name: self.get(name) for name in self._schema}
