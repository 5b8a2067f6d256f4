"""Deterministic accessory identifiers."""

import uuid

# Fixed namespace so the same device address yields the same identifier on every run.
ACCESSORY_NAMESPACE = uuid.UUID("7c5d2f3e-4a61-5b0e-9d1c-8e2a6f4b3c90")


def generate_uuid(data: str) -> str:
    """Generate the accessory UUID for ``data`` (typically a MAC address)."""
    return str(uuid.uuid5(ACCESSORY_NAMESPACE, data.strip().upper()))
