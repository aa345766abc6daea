"""Tests for stored documents and workload payloads."""

from __future__ import annotations

from datetime import datetime, timezone

from src.state.models import (
    STATE_KIND,
    Document,
    JobPhase,
    WorkloadDetails,
    WorkloadKind,
    new_state_document,
)


class TestWorkloadDetails:
    def test_defaults(self) -> None:
        d = WorkloadDetails()
        assert d.ok is False
        assert d.errors == []
        assert d.lastRun is None
        assert d.authoritativePod == ""

    def test_for_workload(self) -> None:
        d = WorkloadDetails.for_workload(WorkloadKind.JOB)
        assert d.khWorkload == WorkloadKind.JOB
        assert d.ok is False
        assert d.errors == []

    def test_to_spec_is_json_ready(self) -> None:
        d = WorkloadDetails(
            ok=True,
            errors=["a", "b"],
            lastRun=datetime(2025, 1, 1, tzinfo=timezone.utc),
            khWorkload=WorkloadKind.CHECK,
        )
        spec = d.to_spec()
        assert spec["ok"] is True
        assert spec["errors"] == ["a", "b"]
        assert isinstance(spec["lastRun"], str)
        assert spec["khWorkload"] == "KHCheck"

    def test_from_spec(self) -> None:
        d = WorkloadDetails.from_spec({
            "ok": True,
            "errors": ["timeout"],
            "authoritativePod": "pod-1",
            "lastRun": "2025-01-01T00:00:00Z",
            "khWorkload": "KHJob",
        })
        assert d.ok is True
        assert d.errors == ["timeout"]
        assert d.authoritativePod == "pod-1"
        assert d.lastRun == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert d.khWorkload == WorkloadKind.JOB

    def test_errors_order_preserved(self) -> None:
        errs = ["z", "a", "m"]
        assert WorkloadDetails.from_spec(WorkloadDetails(errors=errs).to_spec()).errors == errs


class TestDocument:
    def test_with_spec_keeps_version(self) -> None:
        doc = Document(kind="khjobs", name="j", namespace="ns", spec={"phase": "Running"}, resource_version="7")
        updated = doc.with_spec({"phase": "Completed"})
        assert updated.resource_version == "7"
        assert updated.spec == {"phase": "Completed"}
        assert doc.spec == {"phase": "Running"}

    def test_clone_is_deep(self) -> None:
        doc = Document(kind="khstates", name="c", namespace="ns", spec={"errors": ["x"]})
        copied = doc.clone()
        copied.spec["errors"].append("y")
        assert doc.spec == {"errors": ["x"]}

    def test_new_state_document(self) -> None:
        doc = new_state_document("db-ping", "ops", WorkloadDetails.for_workload(WorkloadKind.CHECK))
        assert doc.kind == STATE_KIND
        assert doc.name == "db-ping"
        assert doc.namespace == "ops"
        assert doc.resource_version == ""
        assert doc.spec["khWorkload"] == "KHCheck"


class TestJobPhase:
    def test_values(self) -> None:
        assert JobPhase.RUNNING.value == "Running"
        assert JobPhase.COMPLETED.value == "Completed"
        assert JobPhase.FAILED.value == "Failed"
