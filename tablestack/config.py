"""table.yaml configuration loading and validation."""

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

import jsonschema
import pulumi
import pulumi_aws
import yaml

from tablestack.spec.validator import validate_table_spec

MANAGED_BY = "tablestack"


@dataclass
class TableConfig:
    """Parsed and validated table.yaml inputs (snake_case).

    region is None when table.yaml leaves it out; the caller fills in the
    region it deploys to (setup region in the CLI, aws:region in the program).
    """

    table_name: str
    hash_key: str
    region: str | None = None
    hash_key_type: str = "S"
    gsi_name: str | None = None
    gsi_hash_key: str | None = None
    enable_point_in_time_recovery: bool = True
    tags: dict[str, str] = field(default_factory=dict)
    ttl_attribute: str | None = None
    access_role_name: str | None = None

    def as_inputs(self) -> dict[str, Any]:
        """Inputs for tablestack.resolver.resolve."""
        return {
            "region": self.region,
            "table_name": self.table_name,
            "hash_key": self.hash_key,
            "hash_key_type": self.hash_key_type,
            "gsi_name": self.gsi_name,
            "gsi_hash_key": self.gsi_hash_key,
            "enable_point_in_time_recovery": self.enable_point_in_time_recovery,
            "tags": dict(self.tags),
            "ttl_attribute": self.ttl_attribute,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TableConfig":
        """Build from an already validated table.yaml document."""
        spec = data.get("spec") or {}
        return cls(
            table_name=spec.get("tableName", ""),
            hash_key=spec.get("hashKey", ""),
            region=spec.get("region"),
            hash_key_type=spec.get("hashKeyType", "S"),
            gsi_name=spec.get("gsiName"),
            gsi_hash_key=spec.get("gsiHashKey"),
            enable_point_in_time_recovery=spec.get("enablePointInTimeRecovery", True),
            tags=spec.get("tags") or {},
            ttl_attribute=spec.get("ttlAttribute"),
            access_role_name=spec.get("accessRoleName"),
        )

    @classmethod
    def from_file(cls, path: str) -> "TableConfig":
        """Load and validate table.yaml from file path."""
        if not Path(path).exists():
            raise SystemExit(f"table.yaml not found: {path}")

        with open(path, encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f)

        try:
            validate_table_spec(data)
        except jsonschema.ValidationError as e:
            raise SystemExit(e.message) from e
        except ValueError as e:
            raise SystemExit(f"table.yaml invalid: {e}") from e

        return cls.from_dict(data)


def load_table_config() -> TableConfig:
    """Load table.yaml from TABLE_YAML_PATH environment variable."""
    path = os.environ.get("TABLE_YAML_PATH")
    if not path:
        raise SystemExit("TABLE_YAML_PATH environment variable required")
    if not Path(path).exists():
        raise SystemExit("TABLE_YAML_PATH must point to table.yaml")
    config = TableConfig.from_file(path)
    if config.region is None:
        config.region = pulumi.Config("aws").get("region")
    return config


def create_aws_provider(region: str) -> pulumi_aws.Provider:
    """Create AWS provider with default resource tags."""
    return pulumi_aws.Provider(
        "aws-tagged",
        region=region,
        default_tags=pulumi_aws.ProviderDefaultTagsArgs(
            tags={"managed-by": MANAGED_BY},
        ),
    )
