"""Resolve table inputs into the desired state of one DynamoDB table."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tablestack.errors import (
    InvalidEnumValue,
    InvalidFieldType,
    MissingRequiredField,
    PartialIndexSpecification,
)

DEFAULT_REGION = "us-east-1"
BILLING_MODE = "PAY_PER_REQUEST"
KEY_TYPES = ("S", "N", "B")
INDEX_PROJECTION = "ALL"


@dataclass(frozen=True)
class KeyAttribute:
    name: str
    type: str


@dataclass(frozen=True)
class SecondaryIndex:
    """Global secondary index. hash_key is None only in compatibility mode."""

    name: str
    hash_key: str | None
    projection_type: str = INDEX_PROJECTION


@dataclass(frozen=True)
class TableSpec:
    """Desired state of the managed table, handed to Pulumi for reconciliation."""

    name: str
    key_attribute: KeyAttribute
    region: str = DEFAULT_REGION
    secondary_index: SecondaryIndex | None = None
    point_in_time_recovery_enabled: bool = True
    tags: dict[str, str] = field(default_factory=dict)
    ttl_attribute: str | None = None
    billing_mode: str = BILLING_MODE

    @property
    def hash_key(self) -> str:
        return self.key_attribute.name

    @property
    def attributes(self) -> list[KeyAttribute]:
        """Key attribute definitions; always exactly the partition key."""
        return [self.key_attribute]

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for printing and comparison."""
        index = None
        if self.secondary_index is not None:
            index = {
                "name": self.secondary_index.name,
                "hashKey": self.secondary_index.hash_key,
                "projectionType": self.secondary_index.projection_type,
            }
        return {
            "name": self.name,
            "region": self.region,
            "billingMode": self.billing_mode,
            "hashKey": self.hash_key,
            "attributes": [{"name": a.name, "type": a.type} for a in self.attributes],
            "secondaryIndex": index,
            "pointInTimeRecoveryEnabled": self.point_in_time_recovery_enabled,
            "ttlAttribute": self.ttl_attribute,
            "tags": dict(self.tags),
        }


def _require_str(inputs: Mapping[str, Any], key: str, default: str | None = None) -> str:
    value = inputs.get(key)
    if value is None:
        value = default
    if not isinstance(value, str) or not value.strip():
        raise MissingRequiredField(key)
    return value


def _optional_str(inputs: Mapping[str, Any], key: str) -> str | None:
    """Empty strings count as unset."""
    value = inputs.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidFieldType(key, value, "string")
    return value


def _resolve_pitr(value: Any) -> bool:
    if value is None:
        return True
    if not isinstance(value, bool):
        raise InvalidFieldType("enable_point_in_time_recovery", value, "bool")
    return value


def _resolve_tags(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidFieldType("tags", value, "mapping of string to string")
    for k, v in value.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise InvalidFieldType(f"tags.{k}", v, "string")
    return dict(value)


def _resolve_index(
    gsi_name: str | None,
    gsi_hash_key: str | None,
    strict: bool,
) -> SecondaryIndex | None:
    if strict:
        if gsi_name is not None and gsi_hash_key is None:
            raise PartialIndexSpecification("gsi_name", "gsi_hash_key")
        if gsi_hash_key is not None and gsi_name is None:
            raise PartialIndexSpecification("gsi_hash_key", "gsi_name")
    if gsi_name is None:
        return None
    return SecondaryIndex(name=gsi_name, hash_key=gsi_hash_key)


def resolve(inputs: Mapping[str, Any], strict_index: bool = True) -> TableSpec:
    """Validate inputs, apply defaults and build a TableSpec.

    inputs uses the snake_case names of the module's variables: region,
    table_name, hash_key, hash_key_type, gsi_name, gsi_hash_key,
    enable_point_in_time_recovery, tags, ttl_attribute.

    With strict_index=False the index is gated on gsi_name alone and
    gsi_hash_key is copied as given, even when it is None.

    Raises:
        MissingRequiredField: table_name, hash_key or region is empty.
        InvalidEnumValue: hash_key_type is not S, N or B.
        InvalidFieldType: enable_point_in_time_recovery is not a bool, tags is
            not a mapping of strings, or an optional name is not a string.
        PartialIndexSpecification: strict mode and only one index input set.

    Empty gsi_name, gsi_hash_key and ttl_attribute count as unset.
    """
    table_name = _require_str(inputs, "table_name")
    hash_key = _require_str(inputs, "hash_key")
    region = _require_str(inputs, "region", default=DEFAULT_REGION)

    hash_key_type = inputs.get("hash_key_type")
    if hash_key_type is None:
        hash_key_type = "S"
    if hash_key_type not in KEY_TYPES:
        raise InvalidEnumValue("hash_key_type", hash_key_type, KEY_TYPES)

    index = _resolve_index(
        _optional_str(inputs, "gsi_name"),
        _optional_str(inputs, "gsi_hash_key"),
        strict_index,
    )

    return TableSpec(
        name=table_name,
        key_attribute=KeyAttribute(name=hash_key, type=hash_key_type),
        region=region,
        secondary_index=index,
        point_in_time_recovery_enabled=_resolve_pitr(inputs.get("enable_point_in_time_recovery")),
        tags=_resolve_tags(inputs.get("tags")),
        ttl_attribute=_optional_str(inputs, "ttl_attribute"),
    )
