from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from keyclaim.keyclaim_error import StateConflictError

Reward = dict[str, Any]


@dataclass
class LinkRecord:
    """Claim state for a single link identifier.

    The key and reward are fixed when the record is created. The claim fields
    are written exactly once, when the key is redeemed.
    """

    key: str
    reward: Reward
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    claimed: bool = False
    claimed_by: str | None = None
    claimed_at: datetime | None = None

    def mark_claimed(self, claimant_id: str) -> None:
        if self.claimed:
            raise StateConflictError(f"Key {self.key} was already claimed")
        self.claimed = True
        self.claimed_by = claimant_id
        self.claimed_at = datetime.now(UTC)
