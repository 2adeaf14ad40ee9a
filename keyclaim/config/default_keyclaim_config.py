from dataclasses import dataclass, field
import json
import logging
import os

from keyclaim.claim_coordinator import default_reward
from keyclaim.config.keyclaim_config import KeyclaimConfig
from keyclaim.constants import CLAIM_SECRET, DEFAULT_CLAIM_SECRET, KEYCLAIM_DEFAULT_REWARD
from keyclaim.link_record import Reward

_LOGGER = logging.getLogger(__name__)


def _reward_from_env() -> Reward:
    value = os.getenv(KEYCLAIM_DEFAULT_REWARD)
    if not value:
        return default_reward()
    reward = json.loads(value)
    if not isinstance(reward, dict):
        raise ValueError(f"{KEYCLAIM_DEFAULT_REWARD} must be a JSON object")
    return reward


@dataclass
class DefaultKeyclaimConfig(KeyclaimConfig):
    """Configuration read from the environment"""

    claim_secret: str = field(
        default_factory=lambda: os.getenv(CLAIM_SECRET, DEFAULT_CLAIM_SECRET)
    )
    default_reward: Reward = field(default_factory=_reward_from_env)

    def __post_init__(self):
        if self.claim_secret == DEFAULT_CLAIM_SECRET:
            _LOGGER.warning(
                f"Using the default claim secret, set {CLAIM_SECRET} in production"
            )

    def get_claim_secret(self) -> str:
        return self.claim_secret

    def get_default_reward(self) -> Reward:
        return self.default_reward
