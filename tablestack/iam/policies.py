"""Inline IAM policy granting access to the managed table."""

import json

import pulumi
import pulumi_aws


def table_access_policy(table_arn: str) -> str:
    """Policy document: dynamodb:* on the table and its index/stream sub-resources.

    The action list is broad; the table ARN is the boundary.
    """
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Action": "dynamodb:*",
                    "Resource": [table_arn, f"{table_arn}/*"],
                }
            ],
        }
    )


def attach_table_access_policy(
    role_name: str,
    table: pulumi_aws.dynamodb.Table,
    aws_provider: pulumi_aws.Provider,
) -> pulumi_aws.iam.RolePolicy:
    """Attach table_access_policy to an existing role as an inline policy."""
    return pulumi_aws.iam.RolePolicy(
        f"{role_name}_dynamodb_policy",
        role=role_name,
        policy=table.arn.apply(table_access_policy),
        opts=pulumi.ResourceOptions(provider=aws_provider),
    )
