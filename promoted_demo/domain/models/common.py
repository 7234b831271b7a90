"""Defines common Value Objects used across different domain contexts.

These objects represent simple values such as content identifiers, request
ids and search queries, ensuring consistency and type safety.
"""

from typing import NewType

# === Catalog Context ===
ContentId = NewType("ContentId", str)          # Identifier shared by the catalog and the Delivery API

# === Delivery Context ===
ClientRequestId = NewType("ClientRequestId", str)  # Id the client library stamps on each request
SearchQuery = NewType("SearchQuery", str)


def mask_secret(secret: str, visible: int = 4) -> str:
    """Masks all but the last few characters of a secret for display."""
    if not secret:
        return ""
    if len(secret) <= visible:
        return "*" * len(secret)
    return "*" * (len(secret) - visible) + secret[-visible:]
