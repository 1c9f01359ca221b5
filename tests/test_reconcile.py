"""Resubmitting a TableSpec to a simulated provisioning engine is a no-op."""

from typing import Any

from tablestack.resolver import TableSpec, resolve


class RecordingEngine:
    """Stand-in for the provisioning engine: remembers the last state per table and diffs."""

    def __init__(self) -> None:
        self.state: dict[str, dict[str, Any]] = {}

    def reconcile(self, spec: TableSpec) -> list[str]:
        desired = spec.to_dict()
        current = self.state.get(spec.name)
        if current is None:
            changes = ["create"]
        else:
            changes = [f"update {key}" for key in sorted(desired) if desired[key] != current[key]]
        self.state[spec.name] = desired
        return changes


def _inputs(**overrides: Any) -> dict[str, Any]:
    inputs = {
        "table_name": "orders",
        "hash_key": "order_id",
        "hash_key_type": "N",
        "gsi_name": "customer-index",
        "gsi_hash_key": "customer_id",
        "tags": {"Environment": "prod"},
    }
    inputs.update(overrides)
    return inputs


def test_second_submission_is_noop() -> None:
    """The same spec submitted twice changes nothing the second time."""
    engine = RecordingEngine()
    assert engine.reconcile(resolve(_inputs())) == ["create"]
    assert engine.reconcile(resolve(_inputs())) == []


def test_changed_input_produces_only_that_change() -> None:
    """Toggling PITR shows up as a single update."""
    engine = RecordingEngine()
    engine.reconcile(resolve(_inputs()))
    changes = engine.reconcile(resolve(_inputs(enable_point_in_time_recovery=False)))
    assert changes == ["update pointInTimeRecoveryEnabled"]


def test_dropping_index_is_an_update() -> None:
    """Removing both index inputs removes the index and nothing else."""
    engine = RecordingEngine()
    engine.reconcile(resolve(_inputs()))
    changes = engine.reconcile(resolve(_inputs(gsi_name=None, gsi_hash_key=None)))
    assert changes == ["update secondaryIndex"]
