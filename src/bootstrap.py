"""Wires the state service from settings.

The service itself takes its store, pod name and clock as arguments; this
module is the one place that reads configuration to build them.
"""

from __future__ import annotations

import logging
import socket
from pathlib import Path

from src.config import Settings, settings
from src.state import InMemoryStore, KubeStore, SQLiteStore, StateRepository, StateService
from src.state.sqlite_store import DB_PATH

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def configure_logging(cfg: Settings | None = None) -> None:
    cfg = cfg or settings
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def build_repository(cfg: Settings | None = None) -> StateRepository:
    """Create the configured state store backend."""
    cfg = cfg or settings
    backend = cfg.store_backend.lower()

    if backend == "memory":
        logger.warning("Using in-memory state store; state is lost on exit")
        return InMemoryStore()

    if backend == "sqlite":
        db_path = Path(cfg.state_db_path) if cfg.state_db_path else DB_PATH
        logger.info("Using SQLite state store at %s", db_path)
        return SQLiteStore(db_path=db_path, timeout=cfg.store_timeout_seconds)

    if backend == "kube":
        options = {
            "group": cfg.crd_group,
            "version": cfg.crd_version,
            "ca_file": cfg.kube_ca_file,
            "timeout": cfg.store_timeout_seconds,
        }
        logger.info("Using Kubernetes state store at %s (%s/%s)", cfg.kube_api_url, cfg.crd_group, cfg.crd_version)
        if cfg.kube_token:
            return KubeStore(cfg.kube_api_url, cfg.kube_token, **options)
        return KubeStore.from_token_file(cfg.kube_api_url, cfg.kube_token_file, **options)

    raise ValueError(f"Invalid store backend: {cfg.store_backend}. Must be one of ('memory', 'sqlite', 'kube')")


def build_state_service(
    cfg: Settings | None = None,
    repository: StateRepository | None = None,
) -> StateService:
    """Create a StateService for this process."""
    cfg = cfg or settings
    pod_name = cfg.pod_name or socket.gethostname()
    return StateService(repository or build_repository(cfg), pod_name=pod_name)
