import logging
import secrets
import string
from dataclasses import dataclass
from typing import Container

from keyclaim.keyclaim_error import KeyGenerationError

_LOGGER = logging.getLogger(__name__)

KEY_ALPHABET = string.digits + string.ascii_uppercase
LINK_ID_ALPHABET = string.digits + "abcdef"


@dataclass
class KeyGenerator:
    """Generates fixed length random identifiers that are not already in use.

    Each character is drawn independently and uniformly from the alphabet using
    the `secrets` module. With the defaults (8 characters from 36 symbols) there
    are 36**8, roughly 2.8e12, possible keys, so the chance that a single draw
    hits one of n existing keys is n / 2.8e12. A candidate is always checked
    against the existing identifiers and redrawn on collision, so uniqueness
    does not rest on that probability.
    """

    length: int = 8
    alphabet: str = KEY_ALPHABET
    max_attempts: int = 100

    def __post_init__(self):
        if self.length < 1:
            raise ValueError("length must be positive")
        if len(set(self.alphabet)) < 2:
            raise ValueError("alphabet must contain at least two distinct symbols")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be positive")

    @property
    def key_space(self) -> int:
        return len(set(self.alphabet)) ** self.length

    def collision_probability(self, existing_count: int) -> float:
        """Chance that a single draw collides with one of existing_count identifiers"""
        return min(existing_count / self.key_space, 1.0)

    def new_candidate(self) -> str:
        return "".join(secrets.choice(self.alphabet) for _ in range(self.length))

    def generate(self, existing: Container[str]) -> str:
        """Draw candidates until one is not contained in existing"""
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.new_candidate()
            if candidate not in existing:
                return candidate
            _LOGGER.warning(f"Generated identifier collided on attempt {attempt}")
        raise KeyGenerationError(
            f"No unused identifier found after {self.max_attempts} attempts"
        )


def create_link_id_generator() -> KeyGenerator:
    """Short opaque link ids: 6 lowercase hex characters"""
    return KeyGenerator(length=6, alphabet=LINK_ID_ALPHABET)
