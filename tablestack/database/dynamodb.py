"""DynamoDB Table provisioning."""

from dataclasses import dataclass
from typing import Any

import pulumi
import pulumi_aws

from tablestack.resolver import TableSpec


@dataclass
class TableOutputs:
    """Attributes of the realized table, as reported back by Pulumi."""

    table_arn: pulumi.Output[str]
    table_id: pulumi.Output[str]
    table_name: pulumi.Output[str]
    table_stream_arn: pulumi.Output[str]

    @classmethod
    def from_table(cls, table: pulumi_aws.dynamodb.Table) -> "TableOutputs":
        return cls(
            table_arn=table.arn,
            table_id=table.id,
            table_name=table.name,
            table_stream_arn=table.stream_arn,
        )

    def export(self) -> None:
        """Register the outputs as Pulumi stack exports."""
        pulumi.export("table_arn", self.table_arn)
        pulumi.export("table_id", self.table_id)
        pulumi.export("table_name", self.table_name)
        pulumi.export("table_stream_arn", self.table_stream_arn)


def table_args(spec: TableSpec) -> dict[str, Any]:
    """Render a TableSpec as keyword arguments for pulumi_aws.dynamodb.Table."""
    attribute_defs = [
        pulumi_aws.dynamodb.TableAttributeArgs(name=attr.name, type=attr.type)
        for attr in spec.attributes
    ]

    indexes = None
    index = spec.secondary_index
    if index is not None:
        # Index keys must be declared attributes; the index key type is always S.
        if index.hash_key and index.hash_key != spec.hash_key:
            attribute_defs.append(
                pulumi_aws.dynamodb.TableAttributeArgs(name=index.hash_key, type="S")
            )
        indexes = [
            pulumi_aws.dynamodb.TableGlobalSecondaryIndexArgs(
                name=index.name,
                hash_key=index.hash_key,
                projection_type=index.projection_type,
            )
        ]

    ttl_spec = None
    if spec.ttl_attribute:
        ttl_spec = pulumi_aws.dynamodb.TableTtlArgs(
            attribute_name=spec.ttl_attribute,
            enabled=True,
        )

    return {
        "name": spec.name,
        "billing_mode": spec.billing_mode,
        "hash_key": spec.hash_key,
        "attributes": attribute_defs,
        "global_secondary_indexes": indexes,
        "ttl": ttl_spec,
        "point_in_time_recovery": pulumi_aws.dynamodb.TablePointInTimeRecoveryArgs(
            enabled=spec.point_in_time_recovery_enabled,
        ),
        "tags": dict(spec.tags),
    }


def create_dynamodb_table(
    spec: TableSpec,
    aws_provider: pulumi_aws.Provider,
) -> pulumi_aws.dynamodb.Table:
    """Create the DynamoDB table described by spec."""
    resource_name = f"{spec.name.replace('-', '_').replace('.', '_')}_table"
    return pulumi_aws.dynamodb.Table(
        resource_name,
        **table_args(spec),
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )
