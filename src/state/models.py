"""Stored documents and the payloads kept inside them."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

STATE_KIND = "khstates"
JOB_KIND = "khjobs"


class WorkloadKind(str, Enum):
    CHECK = "KHCheck"
    JOB = "KHJob"


class JobPhase(str, Enum):
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass
class Document:
    """A single versioned document as held by the store."""

    kind: str
    name: str
    namespace: str
    spec: dict[str, Any] = field(default_factory=dict)
    resource_version: str = ""

    def with_spec(self, spec: dict[str, Any]) -> "Document":
        """Copy of this document with a new spec and the same resource version."""
        return replace(self, spec=copy.deepcopy(spec))

    def clone(self) -> "Document":
        return replace(self, spec=copy.deepcopy(self.spec))


class WorkloadDetails(BaseModel):
    """Result of the last run of a check or job, stored as a khstate spec."""

    ok: bool = False
    errors: list[str] = Field(default_factory=list)
    runDuration: str = ""
    namespace: str = ""
    lastRun: datetime | None = None
    authoritativePod: str = ""
    uuid: str = ""
    khWorkload: WorkloadKind | None = None

    @field_validator("errors", mode="before")
    @classmethod
    def _nil_errors(cls, v: Any) -> Any:
        # Go writers serialize an empty error slice as null
        return [] if v is None else v

    @field_validator("khWorkload", mode="before")
    @classmethod
    def _blank_workload(cls, v: Any) -> Any:
        return None if v == "" else v

    @classmethod
    def for_workload(cls, workload: WorkloadKind) -> "WorkloadDetails":
        """Empty state for a workload that has never reported."""
        return cls(khWorkload=workload)

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> "WorkloadDetails":
        return cls.model_validate(spec)

    def to_spec(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def new_state_document(name: str, namespace: str, details: WorkloadDetails) -> Document:
    """Build a khstate document for the given (already sanitized) name."""
    return Document(
        kind=STATE_KIND,
        name=name,
        namespace=namespace,
        spec=details.to_spec(),
    )
