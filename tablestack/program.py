"""Provision the table described by a TableConfig."""

import pulumi
import pulumi_aws

from tablestack.config import TableConfig
from tablestack.database.dynamodb import TableOutputs, create_dynamodb_table
from tablestack.errors import TableSpecError
from tablestack.iam.policies import attach_table_access_policy
from tablestack.resolver import resolve


def provision_table(
    config: TableConfig,
    aws_provider: pulumi_aws.Provider,
) -> TableOutputs:
    """Resolve config into a TableSpec and declare the table (and optional access policy).

    Validation errors abort before any resource is declared.
    """
    try:
        spec = resolve(config.as_inputs())
    except TableSpecError as e:
        raise SystemExit(f"table.yaml invalid: {e}") from e

    pulumi.log.info(f"Table '{spec.name}' keyed on {spec.hash_key} ({spec.key_attribute.type})")
    if spec.secondary_index is not None:
        pulumi.log.info(
            f"Secondary index '{spec.secondary_index.name}' on {spec.secondary_index.hash_key}"
        )
    if not spec.point_in_time_recovery_enabled:
        pulumi.log.warn(f"Point-in-time recovery is disabled for table '{spec.name}'")

    table = create_dynamodb_table(spec, aws_provider)

    if config.access_role_name:
        attach_table_access_policy(config.access_role_name, table, aws_provider)

    return TableOutputs.from_table(table)
