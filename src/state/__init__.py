"""State subsystem — versioned check/job state over a document store."""

from .errors import (
    AlreadyExistsError,
    ConflictError,
    ExistenceCheckError,
    NotFoundError,
    StateError,
    StateFetchError,
    StoreError,
)
from .kube_store import KubeStore
from .memory import InMemoryStore
from .models import JOB_KIND, STATE_KIND, Document, JobPhase, WorkloadDetails, WorkloadKind
from .naming import sanitize_resource_name
from .repository import StateRepository
from .service import StateService
from .sqlite_store import SQLiteStore
