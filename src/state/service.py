"""State service — reads and writes check/job state through a StateRepository.

Concurrent writers are coordinated only by the store's resource version:
every write carries the version it was derived from and a stale writer gets
a ConflictError. Nothing here retries; callers re-fetch and try again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from .errors import AlreadyExistsError, ExistenceCheckError, NotFoundError, StateFetchError
from .models import (
    JOB_KIND,
    STATE_KIND,
    Document,
    JobPhase,
    WorkloadDetails,
    WorkloadKind,
    new_state_document,
)
from .naming import sanitize_resource_name
from .repository import StateRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StateService:
    """Check and job state operations for one orchestrator process."""

    def __init__(
        self,
        repository: StateRepository,
        pod_name: str,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self.pod_name = pod_name
        self._clock = clock or _utcnow

    # ── Existence ────────────────────────────────────────────────────────

    def ensure_exists(self, name: str, namespace: str, workload: WorkloadKind) -> None:
        """Create an empty state resource for the workload if there is none.

        Losing a create race to another process is fine: the resource exists
        either way.
        """
        resource = sanitize_resource_name(name)

        logger.debug("Checking existence of state resource: %s/%s", namespace, resource)
        try:
            self.repository.get(STATE_KIND, resource, namespace)
            logger.debug("State resource found: %s/%s", namespace, resource)
            return
        except NotFoundError as e:
            logger.info("State resource not found, creating resource: %s/%s - %s", namespace, resource, e)

        initial = new_state_document(resource, namespace, WorkloadDetails.for_workload(workload))
        try:
            self.repository.create(initial, namespace)
        except AlreadyExistsError:
            logger.debug("State resource %s/%s created concurrently", namespace, resource)

    # ── Reads ────────────────────────────────────────────────────────────

    def _read_state(self, name: str, namespace: str, workload: WorkloadKind) -> WorkloadDetails:
        resource = sanitize_resource_name(name)
        ident = {"kind": STATE_KIND, "name": resource, "namespace": namespace}

        try:
            self.ensure_exists(name, namespace, workload)
        except Exception as e:
            raise ExistenceCheckError(
                f"Error validating state resource exists: {resource}: {e}", **ident,
            ) from e

        logger.debug("Retrieving state resource for: %s/%s", namespace, resource)
        try:
            doc = self.repository.get(STATE_KIND, resource, namespace)
            details = WorkloadDetails.from_spec(doc.spec)
        except Exception as e:
            raise StateFetchError(
                f"Error retrieving state resource: {resource}: {e}", **ident,
            ) from e
        logger.debug("Successfully retrieved state resource: %s/%s", namespace, resource)
        return details

    def get_check_state(self, name: str, namespace: str) -> WorkloadDetails:
        """Current state of a check, creating an empty one on first sight."""
        return self._read_state(name, namespace, WorkloadKind.CHECK)

    def get_job_state(self, name: str, namespace: str) -> WorkloadDetails:
        """Current state of a job, creating an empty one on first sight."""
        return self._read_state(name, namespace, WorkloadKind.JOB)

    # ── Writes ───────────────────────────────────────────────────────────

    def set_check_state(self, name: str, namespace: str, details: WorkloadDetails) -> Document:
        """Write a check's latest result over its existing state resource.

        The resource must already exist (see ensure_exists). The stored spec
        is replaced whole, stamped with this pod's name and the current time.
        """
        resource = sanitize_resource_name(name)

        # the current resource version comes from the existing document
        existing = self.repository.get(STATE_KIND, resource, namespace)

        state = details.model_copy(deep=True)
        state.authoritativePod = self.pod_name
        state.lastRun = self._clock()

        updated = new_state_document(resource, namespace, state)
        updated.resource_version = existing.resource_version

        logger.debug(
            "%s %s writing state with ok: %s and errors: %s at last run: %s",
            namespace, name, state.ok, state.errors, state.lastRun,
        )
        return self.repository.update(updated, namespace)

    def set_job_phase(self, name: str, namespace: str, phase: JobPhase | str) -> Document:
        """Move a job to a new phase, leaving the rest of its spec untouched.

        Any phase may replace any other; there is no transition table.
        """
        resource = sanitize_resource_name(name)
        phase_value = phase.value if isinstance(phase, JobPhase) else str(phase)

        try:
            job = self.repository.get(JOB_KIND, resource, namespace)
        except Exception:
            logger.error("Error getting job: %s/%s", namespace, resource)
            raise

        spec = dict(job.spec)
        spec["phase"] = phase_value
        updated = job.with_spec(spec)

        logger.info("Setting job %s/%s phase to: %s", namespace, resource, phase_value)
        return self.repository.update(updated, namespace)
