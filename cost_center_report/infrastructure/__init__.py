"""Infrastructure layer exports."""

from .credentials import (
    CredentialStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    mask_token,
)
from .github_billing import GitHubBillingClient, error_for_status

__all__ = [
    "CredentialStore",
    "GitHubBillingClient",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "error_for_status",
    "mask_token",
]
