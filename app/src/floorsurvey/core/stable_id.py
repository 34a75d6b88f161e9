from __future__ import annotations

import hashlib
import re
import uuid

# Only the hyphenated 8-4-4-4-12 form passes through; braces, URNs and bare
# hex digits are hashed like any other key.
CANONICAL_UUID = re.compile(r'[0-9A-Fa-f]{8}(-[0-9A-Fa-f]{4}){3}-[0-9A-Fa-f]{12}')


def new_id() -> uuid.UUID:
    return uuid.uuid4()


def derive_id(key: str, namespace: str = "") -> uuid.UUID:
    """Derive a reproducible UUID for *key* within *namespace*.

    Keys written as a canonical UUID are returned unchanged. Anything else is
    hashed with SHA-256 over ``namespace:key`` (just ``key`` when the
    namespace is empty); the first 16 bytes become the UUID, with the version
    nibble forced to 5 and the RFC 4122 variant bits set.
    """
    if CANONICAL_UUID.fullmatch(key):
        return uuid.UUID(key)
    seed = f"{namespace}:{key}" if namespace else key
    digest = bytearray(hashlib.sha256(seed.encode('utf-8')).digest()[:16])
    digest[6] = (digest[6] & 0x0F) | 0x50
    digest[8] = (digest[8] & 0x3F) | 0x80
    return uuid.UUID(bytes=bytes(digest))
