"""httpx-based StateRepository over Kubernetes custom resources.

khstates and khjobs live as namespaced custom resources; the API server
enforces resourceVersion on PUT, which gives us compare-and-swap for free.
All methods return Documents or raise NotFoundError / AlreadyExistsError /
ConflictError / StoreError.
"""

from __future__ import annotations

import logging
import ssl
from pathlib import Path
from typing import Any

import httpx

from .errors import AlreadyExistsError, ConflictError, NotFoundError, StoreError
from .models import JOB_KIND, STATE_KIND, Document
from .repository import StateRepository

logger = logging.getLogger(__name__)

RESOURCE_KINDS = {
    STATE_KIND: "KuberhealthyState",
    JOB_KIND: "KuberhealthyJob",
}


class KubeStore(StateRepository):
    """Synchronous client for khstate / khjob custom resources."""

    def __init__(
        self,
        api_url: str,
        token: str = "",
        *,
        group: str = "comcast.github.io",
        version: str = "v1",
        ca_file: str = "",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._token = token
        self._group = group
        self._version = version
        self._verify: ssl.SSLContext | bool = (
            ssl.create_default_context(cafile=ca_file) if ca_file else True
        )
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_token_file(cls, api_url: str, token_file: Path | str, **kwargs: Any) -> "KubeStore":
        """Build a store authenticated with a mounted service account token."""
        token = Path(token_file).read_text(encoding="utf-8").strip()
        return cls(api_url, token, **kwargs)

    @property
    def _headers(self) -> dict[str, str]:
        h = {"Accept": "application/json"}
        if self._token:
            h["Authorization"] = f"Bearer {self._token}"
        return h

    @property
    def api_version(self) -> str:
        return f"{self._group}/{self._version}"

    def _collection_path(self, kind: str, namespace: str) -> str:
        return f"/apis/{self._group}/{self._version}/namespaces/{namespace}/{kind}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        kind: str,
        name: str,
        namespace: str,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request to the API server and map failures onto store errors."""
        ident = {"kind": kind, "name": name, "namespace": namespace}
        try:
            with httpx.Client(
                timeout=self._timeout, verify=self._verify, transport=self._transport,
            ) as client:
                resp = client.request(
                    method, f"{self._api_url}{path}", headers=self._headers, json=json_data,
                )
        except httpx.TimeoutException as e:
            raise StoreError(f"{method} {path} timed out", **ident) from e
        except httpx.HTTPError as e:
            raise StoreError(f"{method} {path} failed: {e}", **ident) from e

        if resp.status_code < 400:
            try:
                return resp.json()
            except ValueError as e:
                raise StoreError(f"{method} {path}: invalid JSON response", **ident) from e

        reason = ""
        detail = resp.text
        try:
            body = resp.json()
            reason = body.get("reason", "")
            detail = body.get("message", resp.text)
        except Exception:
            pass

        msg = f"{method} {path}: {resp.status_code} {detail}"
        if resp.status_code == 404:
            raise NotFoundError(msg, **ident)
        if resp.status_code == 409:
            if reason == "AlreadyExists" or (not reason and method == "POST"):
                raise AlreadyExistsError(msg, **ident)
            raise ConflictError(msg, **ident)
        raise StoreError(msg, **ident)

    def _to_body(self, document: Document, namespace: str) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": document.name, "namespace": namespace}
        if document.resource_version:
            metadata["resourceVersion"] = document.resource_version
        return {
            "apiVersion": self.api_version,
            "kind": RESOURCE_KINDS.get(document.kind, document.kind),
            "metadata": metadata,
            "spec": document.spec,
        }

    @staticmethod
    def _from_body(kind: str, body: dict[str, Any]) -> Document:
        metadata = body.get("metadata", {})
        return Document(
            kind=kind,
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            spec=body.get("spec") or {},
            resource_version=str(metadata.get("resourceVersion", "")),
        )

    # ── StateRepository ─────────────────────────────────────────────────

    def get(self, kind: str, name: str, namespace: str) -> Document:
        """GET .../namespaces/{namespace}/{kind}/{name}"""
        path = f"{self._collection_path(kind, namespace)}/{name}"
        body = self._request("GET", path, kind=kind, name=name, namespace=namespace)
        return self._from_body(kind, body)

    def create(self, document: Document, namespace: str) -> Document:
        """POST .../namespaces/{namespace}/{kind}"""
        kind = document.kind
        path = self._collection_path(kind, namespace)
        created = document.clone()
        created.resource_version = ""
        body = self._request(
            "POST", path, kind=kind, name=document.name, namespace=namespace,
            json_data=self._to_body(created, namespace),
        )
        return self._from_body(kind, body)

    def update(self, document: Document, namespace: str) -> Document:
        """PUT .../namespaces/{namespace}/{kind}/{name}"""
        kind = document.kind
        if not document.resource_version:
            # the API server would treat this as an unconditional replace
            raise ConflictError(
                f"{kind} {document.name!r} update carries no resource version",
                kind=kind, name=document.name, namespace=namespace,
            )
        path = f"{self._collection_path(kind, namespace)}/{document.name}"
        body = self._request(
            "PUT", path, kind=kind, name=document.name, namespace=namespace,
            json_data=self._to_body(document, namespace),
        )
        return self._from_body(kind, body)
