"""Tests for the table access policy."""

import json
from unittest.mock import MagicMock, patch

from tablestack.iam.policies import attach_table_access_policy, table_access_policy

TABLE_ARN = "arn:aws:dynamodb:us-east-1:123456789012:table/orders"


def test_table_access_policy_scoped_to_table() -> None:
    """dynamodb:* on the table ARN and its sub-resources only."""
    doc = json.loads(table_access_policy(TABLE_ARN))

    assert doc["Version"] == "2012-10-17"
    (statement,) = doc["Statement"]
    assert statement["Effect"] == "Allow"
    assert statement["Action"] == "dynamodb:*"
    assert statement["Resource"] == [TABLE_ARN, f"{TABLE_ARN}/*"]


@patch("tablestack.iam.policies.pulumi.ResourceOptions")
@patch("tablestack.iam.policies.pulumi_aws.iam.RolePolicy")
def test_attach_table_access_policy(mock_role_policy: MagicMock, mock_opts: MagicMock) -> None:
    """Inline RolePolicy on the named role, policy derived from the table ARN."""
    table = MagicMock()
    aws_provider = MagicMock()

    attach_table_access_policy("orders-api-task", table, aws_provider)

    mock_role_policy.assert_called_once()
    assert mock_role_policy.call_args[0][0] == "orders-api-task_dynamodb_policy"
    kw = mock_role_policy.call_args[1]
    assert kw["role"] == "orders-api-task"
    assert kw["policy"] is table.arn.apply.return_value
    table.arn.apply.assert_called_once_with(table_access_policy)
    mock_opts.assert_called_once_with(provider=aws_provider)
