# src/localconfig/core/canonical.py
"""
Canonical JSON serialization for deterministic hashing.

Two-phase approach:
1. Normalize: Convert tuples and out-of-range integers to JSON-safe primitives
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

Used for JSON-valued defaults (setrlimit) and for the stable hash reported
after every reconciliation, so an unchanged configuration always hashes the
same regardless of dict insertion order.

IMPORTANT: NaN and Infinity are strictly REJECTED, not silently converted.
"""

from __future__ import annotations

import hashlib
import math
from typing import Any

import rfc8785

# Version string reported with every hash
CANONICAL_VERSION = "sha256-rfc8785-v1"

# Largest integer JSON numbers represent exactly (RFC 8785 uses IEEE doubles)
_MAX_SAFE_INTEGER = 2**53 - 1


def _normalize_value(obj: Any) -> Any:
    """Convert a single value to a JSON-safe primitive.

    Integers outside the exactly-representable JSON range are tagged as
    ``{"__int__": "<digits>"}`` so they hash without loss.

    Raises:
        ValueError: If value is a non-finite float
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot canonicalize non-finite float: {obj}. Use None for unset values.")
        return obj

    if isinstance(obj, int) and not isinstance(obj, bool) and abs(obj) > _MAX_SAFE_INTEGER:
        return {"__int__": str(obj)}

    return obj


def _normalize_for_canonical(data: Any) -> Any:
    """Recursively normalize a data structure for canonical JSON."""
    if isinstance(data, dict):
        return {str(k): _normalize_for_canonical(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON (no whitespace, sorted keys).

    Args:
        obj: Data structure to serialize

    Returns:
        Canonical JSON string

    Raises:
        ValueError: If data contains NaN or Infinity
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def stable_hash(obj: Any, version: str = CANONICAL_VERSION) -> str:
    """Compute stable hash of object.

    Args:
        obj: Data structure to hash
        version: Hash algorithm version

    Returns:
        SHA-256 hex digest of canonical JSON
    """
    canonical = canonical_json(obj)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
