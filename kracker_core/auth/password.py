"""Password hashing with Argon2id.

Encoded hashes are PHC strings (``$argon2id$v=19$m=65536,t=3,p=1$<salt>$<hash>``)
carrying the algorithm, parameters and salt, so verification needs no
external state. Parameters are tunable per deployment; the defaults are the
development values (3 iterations, 64 MiB, 1 lane).
"""

import logging

from argon2 import PasswordHasher as Argon2Hasher, Type
from argon2.exceptions import HashingError as Argon2HashingError, VerificationError

from ..exceptions import HashingError

logger = logging.getLogger(__name__)

MIN_SALT_BYTES = 16
_DUMMY_PASSWORD = "kracker-dummy-password"


class PasswordHasher:
    """One-way salted password hashing and verification.

    Instances hold only immutable cost parameters and a dummy hash computed
    at construction, so they are safe to share between concurrent requests.
    Cost parameters the primitive cannot satisfy fail at construction with
    HashingError.
    """

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 1,
        hash_len: int = 32,
        salt_len: int = MIN_SALT_BYTES,
    ):
        """
        Args:
            time_cost: Number of Argon2 iterations
            memory_cost: Working memory in KiB
            parallelism: Number of lanes
            hash_len: Raw hash length in bytes
            salt_len: Random salt length in bytes (at least 16)
        """
        if salt_len < MIN_SALT_BYTES:
            raise ValueError(f"salt_len must be at least {MIN_SALT_BYTES} bytes")

        self._hasher = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=hash_len,
            salt_len=salt_len,
            type=Type.ID,
        )
        # Hashed with the configured costs, like every stored hash
        self._dummy_hash = self.hash(_DUMMY_PASSWORD)

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh random salt.

        Raises:
            HashingError: If the primitive fails (e.g. cannot allocate memory)
        """
        try:
            return self._hasher.hash(password)
        except Argon2HashingError as e:
            logger.error(f"Argon2 hashing failed: {e}")
            raise HashingError("Password hashing failed") from e

    def verify(self, password: str, encoded_hash: str) -> bool:
        """
        Check a password against an encoded hash.

        Never raises: a mismatch, a malformed hash or a primitive failure all
        return False. A malformed hash still costs one dummy verification.
        """
        if not isinstance(encoded_hash, str):
            logger.warning("Stored password hash is not a string")
            return self.dummy_verify(password)

        try:
            return self._hasher.verify(encoded_hash, password)
        except VerificationError:
            return False
        except ValueError:
            # InvalidHashError, or a hash that is not ASCII
            logger.warning("Stored password hash is malformed")
            return self.dummy_verify(password)

    def dummy_verify(self, password: str) -> bool:
        """Spend one verification against a throwaway hash and return False."""
        try:
            self._hasher.verify(self._dummy_hash, password)
        except (VerificationError, ValueError, TypeError):
            pass
        return False
