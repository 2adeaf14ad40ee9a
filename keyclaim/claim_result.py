from dataclasses import dataclass
from enum import Enum

from keyclaim.link_record import Reward


class ClaimStatus(Enum):
    """Outcome of a coordinator operation"""

    CREATED = "CREATED"
    EXISTING = "EXISTING"
    CLAIMED = "CLAIMED"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    RECORD_MISSING = "RECORD_MISSING"
    LINK_EXISTS = "LINK_EXISTS"


@dataclass(frozen=True)
class IssuedKey:
    key: str
    claimed: bool
    reward: Reward
    status: ClaimStatus = ClaimStatus.CREATED


@dataclass(frozen=True)
class ClaimResult:
    status: ClaimStatus
    reward: Reward | None = None
    claimed_by: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == ClaimStatus.CLAIMED


@dataclass(frozen=True)
class CreateResult:
    status: ClaimStatus
    link_id: str
    key: str
    reward: Reward

    @property
    def ok(self) -> bool:
        return self.status == ClaimStatus.CREATED
