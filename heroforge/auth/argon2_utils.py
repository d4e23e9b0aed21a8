"""
Argon2 password hashing utilities for HeroForge.

All stored credentials are Argon2id hashes. Cost parameters can be tuned
with the ARGON2_TIME_COST, ARGON2_MEMORY_COST, ARGON2_PARALLELISM and
ARGON2_HASH_LENGTH environment variables and are range-checked at import.
"""

import os

from argon2 import PasswordHasher, Type, exceptions
from argon2.exceptions import VerificationError

from ..exceptions import DatabaseError
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import log_and_raise

logger = get_logger(__name__)

TIME_COST = int(os.getenv("ARGON2_TIME_COST", "3"))
MEMORY_COST = int(os.getenv("ARGON2_MEMORY_COST", "65536"))  # KiB
PARALLELISM = int(os.getenv("ARGON2_PARALLELISM", "1"))
HASH_LENGTH = int(os.getenv("ARGON2_HASH_LENGTH", "32"))

if TIME_COST < 1 or TIME_COST > 10:
    raise ValueError(f"ARGON2_TIME_COST must be between 1 and 10, got {TIME_COST}")
if MEMORY_COST < 1024 or MEMORY_COST > 1048576:
    raise ValueError(f"ARGON2_MEMORY_COST must be between 1024 and 1048576, got {MEMORY_COST}")
if PARALLELISM < 1 or PARALLELISM > 16:
    raise ValueError(f"ARGON2_PARALLELISM must be between 1 and 16, got {PARALLELISM}")
if HASH_LENGTH < 16 or HASH_LENGTH > 64:
    raise ValueError(f"ARGON2_HASH_LENGTH must be between 16 and 64, got {HASH_LENGTH}")

_default_hasher = PasswordHasher(
    type=Type.ID,
    time_cost=TIME_COST,
    memory_cost=MEMORY_COST,
    parallelism=PARALLELISM,
    hash_len=HASH_LENGTH,
)


def hash_password(password: str) -> str:
    """
    Hash a plaintext password using Argon2id.

    Returns:
        Argon2id hash string in format: $argon2id$v=19$m=65536,t=3,p=1$...

    Raises:
        DatabaseError: If hashing fails
    """
    try:
        return _default_hasher.hash(password)
    except exceptions.HashingError as e:
        log_and_raise(
            DatabaseError,
            f"Failed to hash password: {e}",
            details={"error_type": type(e).__name__},
            operation="hash_password",
        )


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a plaintext password against an Argon2 hash.

    Returns:
        True if password matches hash, False otherwise
    """
    if not hashed:
        logger.warning("Password verification failed - empty hash")
        return False

    try:
        return _default_hasher.verify(hashed, password)
    except (VerificationError, exceptions.InvalidHashError) as e:
        logger.debug("Password verification failed", error_type=type(e).__name__)
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a hash was produced with different cost parameters than the current ones."""
    if not hashed.startswith("$argon2"):
        return True
    try:
        return _default_hasher.check_needs_rehash(hashed)
    except (ValueError, exceptions.InvalidHashError) as e:
        logger.error("Error checking password rehash needs", error=str(e), error_type=type(e).__name__)
        return True
