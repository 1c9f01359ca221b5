"""
tablestack CLI: setup, validate, create, outputs, destroy, list.
Run `tablestack setup` once; then `tablestack create <table.yaml>`.
"""

import json
import os
from pathlib import Path
import subprocess
import sys
from typing import Any

import yaml

from tablestack.config import MANAGED_BY, TableConfig
from tablestack.errors import ReconciliationFailure, TableSpecError
from tablestack.resolver import resolve

CONFIG_DIR = ".tablestack"
CONFIG_FILENAME = "config.yaml"
DEFAULT_STACK_PREFIX = "dev"
PROGRAM_DIR = "tablestack"


def _project_root() -> Path:
    """Directory containing tablestack/Pulumi.yaml; cwd by default."""
    return Path.cwd()


def _config_path() -> Path:
    return _project_root() / CONFIG_DIR / CONFIG_FILENAME


def _load_config() -> dict[str, Any] | None:
    path = _config_path()
    if not path.exists():
        return None
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else None


def _save_config(backend_url: str, region: str, stack_prefix: str = DEFAULT_STACK_PREFIX) -> None:
    path = _config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            {
                "backend_url": backend_url,
                "region": region,
                "stack_prefix": stack_prefix,
            },
            f,
            default_flow_style=False,
        )
    print(f"Configuration saved to {path}")


def _require_config() -> dict[str, Any]:
    config = _load_config()
    if not config or not config.get("backend_url") or not config.get("region"):
        print("Configuration missing or incomplete. Run: tablestack setup", file=sys.stderr)
        sys.exit(1)
    return config


def _run(
    cmd: list[str],
    env: dict[str, str] | None = None,
    check: bool = True,
    capture: bool = False,
) -> subprocess.CompletedProcess:
    full_env = os.environ.copy()
    if env:
        full_env.update(env)
    return subprocess.run(
        cmd,
        cwd=_project_root(),
        env=full_env,
        check=check,
        capture_output=capture,
        text=capture,
    )


def _pulumi(*args: str) -> list[str]:
    return ["pulumi", *args, "-C", PROGRAM_DIR]


def _run_step(step: str, stack: str, cmd: list[str], env: dict[str, str]) -> None:
    """Run one pulumi command for a stack; a non-zero exit is a ReconciliationFailure."""
    try:
        _run(cmd, env=env)
    except subprocess.CalledProcessError as e:
        raise ReconciliationFailure(stack, e.returncode, command=step) from e


def _stack_name(table_name: str, region: str, config: dict[str, Any]) -> str:
    prefix = config.get("stack_prefix", DEFAULT_STACK_PREFIX)
    return f"{prefix}.{table_name}.{region}"


def _require_program_dir() -> None:
    if not (_project_root() / PROGRAM_DIR / "Pulumi.yaml").exists():
        print(f"{PROGRAM_DIR}/Pulumi.yaml not found. Run this from the repo root.", file=sys.stderr)
        sys.exit(1)


def _resolve_path(table_yaml_path: str) -> Path:
    path = Path(table_yaml_path)
    if not path.is_absolute():
        path = _project_root() / path
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        sys.exit(1)
    return path


# --- setup ---


def _cmd_setup() -> None:
    backend_url = os.environ.get("TABLESTACK_BACKEND_URL", "").strip()
    if not backend_url:
        backend_url = input("State backend URL (e.g. s3://my-pulumi-state): ").strip()
    if not backend_url:
        print("Backend URL is required.", file=sys.stderr)
        sys.exit(1)

    region = os.environ.get("TABLESTACK_REGION", "").strip()
    if not region:
        region = input("Default AWS region (e.g. us-east-1): ").strip()
    if not region:
        print("Region is required.", file=sys.stderr)
        sys.exit(1)

    stack_prefix = os.environ.get("TABLESTACK_STACK_PREFIX", DEFAULT_STACK_PREFIX).strip() or DEFAULT_STACK_PREFIX
    _save_config(backend_url, region, stack_prefix)
    print("Setup complete. You can now use: tablestack validate|create <path>, tablestack destroy <table-name>")


# --- validate ---


def _cmd_validate(table_yaml_path: str) -> None:
    path = _resolve_path(table_yaml_path)
    table_config = TableConfig.from_file(str(path))
    config = _load_config()
    if table_config.region is None and config and config.get("region"):
        table_config.region = config["region"]
    spec = resolve(table_config.as_inputs())
    print(json.dumps(spec.to_dict(), indent=2, sort_keys=True))


# --- create ---


def _cmd_create(table_yaml_path: str) -> None:
    config = _require_config()
    path = _resolve_path(table_yaml_path)
    table_config = TableConfig.from_file(str(path))
    if table_config.region is None:
        table_config.region = config["region"]
    # Fail on invalid input before touching any stack.
    spec = resolve(table_config.as_inputs())
    _require_program_dir()

    stack = _stack_name(spec.name, spec.region, config)
    env = {
        "TABLE_YAML_PATH": str(path.resolve()),
        "PULUMI_BACKEND_URL": config["backend_url"],
    }
    select = _run(_pulumi("stack", "select", stack), env=env, check=False)
    if select.returncode != 0:
        _run_step("stack init", stack, _pulumi("stack", "init", stack), env)
    _run_step("config set", stack, _pulumi("config", "set", "aws:region", spec.region), env)
    print(f"Provisioning table '{spec.name}' in {spec.region}...")
    _run_step("up", stack, _pulumi("up", "-y"), env)
    print(f"Table '{spec.name}' provisioned. Run: tablestack outputs {spec.name}")


# --- outputs ---


def _cmd_outputs(table_name: str, region: str | None) -> None:
    config = _require_config()
    _require_program_dir()
    stack = _stack_name(table_name, region or config["region"], config)
    env = {"PULUMI_BACKEND_URL": config["backend_url"]}
    result = _run(
        _pulumi("stack", "output", "--json", "--stack", stack),
        env=env,
        check=False,
        capture=True,
    )
    if result.returncode != 0:
        print(f"No infrastructure found for table '{table_name}' (stack {stack}).", file=sys.stderr)
        sys.exit(1)
    print(result.stdout.strip())


# --- destroy ---


def _cmd_destroy(table_name: str, region: str | None) -> None:
    config = _require_config()
    _require_program_dir()
    stack = _stack_name(table_name, region or config["region"], config)
    env = {"PULUMI_BACKEND_URL": config["backend_url"]}
    select = _run(_pulumi("stack", "select", stack), env=env, check=False)
    if select.returncode != 0:
        print(f"No infrastructure found for table '{table_name}' (stack {stack}).", file=sys.stderr)
        sys.exit(1)
    confirm = input(f"This will delete table '{table_name}' and its data. Continue? [y/N]: ")
    if confirm.strip().lower() != "y":
        print("Cancelled.")
        sys.exit(0)
    _run_step("destroy", stack, _pulumi("destroy", "-y"), env)
    rm = _run(_pulumi("stack", "rm", stack, "--yes"), env=env, check=False)
    if rm.returncode != 0:
        print(f"Stack {stack} could not be removed; remove it manually.", file=sys.stderr)
    print(f"Table '{table_name}' removed.")


# --- list ---


def _cmd_list(region: str | None) -> None:
    import boto3

    config = _load_config()
    if region is None:
        region = config.get("region") if config else os.environ.get("AWS_REGION", "us-east-1")
    client = boto3.client("resourcegroupstaggingapi", region_name=region)

    arns: list[str] = []
    paginator = client.get_paginator("get_resources")
    for page in paginator.paginate(
        TagFilters=[{"Key": "managed-by", "Values": [MANAGED_BY]}],
        ResourceTypeFilters=["dynamodb:table"],
        ResourcesPerPage=100,
    ):
        arns.extend(r["ResourceARN"] for r in page.get("ResourceTagList", []))

    if not arns:
        print("No tablestack-managed tables found.")
        return
    for arn in sorted(arns):
        print(arn)


def main(argv: list[str] | None = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(
        description="Provision a DynamoDB table from table.yaml. Run 'tablestack setup' first."
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("setup", help="One-time setup: state backend, region")
    validate_p = sub.add_parser("validate", help="Validate table.yaml and print the desired state")
    validate_p.add_argument("table_yaml", help="Path to table.yaml")
    create_p = sub.add_parser("create", help="Provision (or update) the table from table.yaml")
    create_p.add_argument("table_yaml", help="Path to table.yaml")
    outputs_p = sub.add_parser("outputs", help="Print table_arn, table_id, table_name, table_stream_arn")
    outputs_p.add_argument("table_name", help="Table name (spec.tableName)")
    outputs_p.add_argument("--region", help="Region the table lives in (default: setup region)")
    destroy_p = sub.add_parser("destroy", help="Delete the table and its stack")
    destroy_p.add_argument("table_name", help="Table name (spec.tableName)")
    destroy_p.add_argument("--region", help="Region the table lives in (default: setup region)")
    list_p = sub.add_parser("list", help="List tablestack-managed tables")
    list_p.add_argument("--region", help="Region to list (default: setup region)")
    args = parser.parse_args(argv)

    try:
        if args.command == "setup":
            _cmd_setup()
        elif args.command == "validate":
            _cmd_validate(args.table_yaml)
        elif args.command == "create":
            _cmd_create(args.table_yaml)
        elif args.command == "outputs":
            _cmd_outputs(args.table_name, args.region)
        elif args.command == "destroy":
            _cmd_destroy(args.table_name, args.region)
        elif args.command == "list":
            _cmd_list(args.region)
    except (TableSpecError, ReconciliationFailure) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
