"""Hashing for user identifiers and drafted text.

Extension user ids never reach logs or error payloads in the clear: they
pass through hash_pii(), a salted SHA-256. Drafts are fingerprinted with
hash_text_for_audit() so repeated submissions can be correlated without
storing what the user wrote.
"""
import hashlib
import logging
from typing import Optional

logger = logging.getLogger(__name__)

MIN_SALT_LENGTH = 32

# Set once at service startup from PII_HASH_SALT
_PII_SALT: Optional[str] = None


def configure_pii_salt(salt: str) -> None:
    """Install the secret salt used by hash_pii().

    Raises:
        ValueError: If the salt is shorter than 32 characters
    """
    global _PII_SALT
    if not salt or len(salt) < MIN_SALT_LENGTH:
        logger.critical(
            "PII_SALT_REJECTED",
            extra={"min_length": MIN_SALT_LENGTH, "length": len(salt or "")}
        )
        raise ValueError(f"PII salt must be at least {MIN_SALT_LENGTH} characters")

    _PII_SALT = salt
    logger.info("PII_SALT_CONFIGURED", extra={"salt_length": len(salt)})


def hash_pii(value: str) -> str:
    """Salted SHA-256 hex digest of a user identifier.

    Raises:
        RuntimeError: If configure_pii_salt() has not been called
    """
    if _PII_SALT is None:
        logger.critical("PII_SALT_MISSING")
        raise RuntimeError("PII salt not configured. Call configure_pii_salt() first.")

    return hashlib.sha256(f"{_PII_SALT}{value}".encode()).hexdigest()


def hash_text_for_audit(text: str) -> str:
    """Unsalted SHA-256 fingerprint of a draft."""
    return hashlib.sha256(text.encode()).hexdigest()
