"""Resource name sanitizing for stored check and job state."""

from __future__ import annotations


def sanitize_resource_name(name: str) -> str:
    """Clean up a check or job name for use as a custom resource name.

    Resource names must be lowercase DNS-1123 subdomains. Only case and
    spaces are normalized here; anything else passes through as-is.
    """
    return name.lower().replace(" ", "-")
