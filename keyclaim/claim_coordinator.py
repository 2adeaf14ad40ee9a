import copy
from dataclasses import dataclass, field
import logging
from typing import Callable, TypeVar

from keyclaim.claim_result import ClaimResult, ClaimStatus, CreateResult, IssuedKey
from keyclaim.key_generator import KeyGenerator, create_link_id_generator
from keyclaim.key_store import KeyStore
from keyclaim.keyclaim_error import (
    InvalidArgumentError,
    PersistenceError,
    StaleStateError,
)
from keyclaim.link_record import Reward
from keyclaim.store_state import StoreState

R = TypeVar("R")
_LOGGER = logging.getLogger(__name__)


def default_reward() -> Reward:
    return {"coins": 100}


@dataclass
class ClaimCoordinator:
    """Issues keys and redeems them against a key store.

    Every operation is a transaction: under the store's lock the state is
    loaded, checked, changed and saved (only if it changed). A save rejected as
    stale restarts the transaction from a fresh load. This is what makes a key
    claimable exactly once when claims race.
    """

    store: KeyStore
    key_generator: KeyGenerator = field(default_factory=KeyGenerator)
    link_id_generator: KeyGenerator = field(default_factory=create_link_id_generator)
    default_reward: Reward = field(default_factory=default_reward)
    max_retries: int = 5

    def __post_init__(self):
        if self.key_generator.alphabet != self.key_generator.alphabet.upper():
            raise ValueError("Key alphabet must be upper case, claims are matched upper case")

    async def issue_or_fetch_key(
        self, link_id: str, default_reward: Reward | None = None
    ) -> IssuedKey:
        """Get the key for a link, generating it on first request"""
        if not link_id or not link_id.strip():
            raise InvalidArgumentError("link_id is required")
        reward = copy.deepcopy(
            self.default_reward if default_reward is None else default_reward
        )

        def issue(state: StoreState) -> tuple[IssuedKey, bool]:
            record = state.links.get(link_id)
            if record is not None:
                issued = IssuedKey(
                    key=record.key,
                    claimed=record.claimed,
                    reward=record.reward,
                    status=ClaimStatus.EXISTING,
                )
                return issued, False
            key = self.key_generator.generate(state.keys)
            record = state.add_link(link_id, key, reward)
            return IssuedKey(key=key, claimed=False, reward=record.reward), True

        issued = await self._transact(issue)
        if issued.status == ClaimStatus.CREATED:
            _LOGGER.info(f"Issued key {issued.key} for link {link_id}")
        return issued

    async def claim(self, key: str, claimant_id: str) -> ClaimResult:
        """Redeem a key for the claimant given. Keys match case insensitively."""
        key = (key or "").strip().upper()
        claimant_id = "" if claimant_id is None else str(claimant_id)
        if not key or not claimant_id:
            raise InvalidArgumentError("key and claimant_id are required")

        def redeem(state: StoreState) -> tuple[ClaimResult, bool]:
            link_id = state.keys.get(key)
            if link_id is None:
                return ClaimResult(status=ClaimStatus.KEY_NOT_FOUND), False
            record = state.links.get(link_id)
            if record is None:
                return ClaimResult(status=ClaimStatus.RECORD_MISSING), False
            if record.claimed:
                result = ClaimResult(
                    status=ClaimStatus.ALREADY_CLAIMED, claimed_by=record.claimed_by
                )
                return result, False
            record.mark_claimed(claimant_id)
            result = ClaimResult(
                status=ClaimStatus.CLAIMED, reward=record.reward, claimed_by=claimant_id
            )
            return result, True

        result = await self._transact(redeem)
        if result.status == ClaimStatus.CLAIMED:
            _LOGGER.info(f"Key {key} claimed by {claimant_id}")
        elif result.status == ClaimStatus.RECORD_MISSING:
            _LOGGER.error(
                f"store_inconsistent: key {key} is indexed but its link record is missing"
            )
        return result

    async def admin_create(
        self, link_id: str | None = None, reward: Reward | None = None
    ) -> CreateResult:
        """Create a key for a link with the reward given, generating the link id if omitted"""
        reward = copy.deepcopy(self.default_reward if reward is None else reward)

        def create(state: StoreState) -> tuple[CreateResult, bool]:
            if link_id and link_id.strip():
                target_link_id = link_id
            else:
                target_link_id = self.link_id_generator.generate(state.links)
            record = state.links.get(target_link_id)
            if record is not None:
                result = CreateResult(
                    status=ClaimStatus.LINK_EXISTS,
                    link_id=target_link_id,
                    key=record.key,
                    reward=record.reward,
                )
                return result, False
            key = self.key_generator.generate(state.keys)
            record = state.add_link(target_link_id, key, reward)
            result = CreateResult(
                status=ClaimStatus.CREATED,
                link_id=target_link_id,
                key=key,
                reward=record.reward,
            )
            return result, True

        result = await self._transact(create)
        if result.status == ClaimStatus.CREATED:
            _LOGGER.info(f"Created key {result.key} for link {result.link_id}")
        return result

    async def get_state(self) -> StoreState:
        """Snapshot of the current state. Changes to it are never saved."""
        return await self.store.load()

    async def _transact(self, operation: Callable[[StoreState], tuple[R, bool]]) -> R:
        for attempt in range(1, self.max_retries + 1):
            async with self.store.lock():
                state = await self.store.load()
                result, changed = operation(state)
                if not changed:
                    return result
                try:
                    await self.store.save(state)
                    return result
                except StaleStateError:
                    _LOGGER.warning(
                        f"Store state changed during transaction, retrying (attempt {attempt})"
                    )
        raise PersistenceError(
            f"Transaction abandoned after {self.max_retries} conflicting attempts"
        )
