from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # State store backend: "memory" | "sqlite" | "kube"
    store_backend: str = "sqlite"

    # SQLite backend
    state_db_path: str = ""  # empty = data/state.db beside the src/ tree

    # Kubernetes backend (in-cluster defaults)
    kube_api_url: str = "https://kubernetes.default.svc"
    kube_token: str = ""  # takes precedence over kube_token_file
    kube_token_file: str = "/var/run/secrets/kubernetes.io/serviceaccount/token"
    kube_ca_file: str = ""  # empty = system CA bundle
    crd_group: str = "comcast.github.io"
    crd_version: str = "v1"
    store_timeout_seconds: float = 30.0

    # Identity written into every check state as authoritativePod
    pod_name: str = ""  # empty = host name

    # Logging
    log_level: str = "INFO"


settings = Settings()
