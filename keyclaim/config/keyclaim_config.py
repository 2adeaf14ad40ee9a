from abc import ABC, abstractmethod

from keyclaim.constants import KEYCLAIM_CONFIG
from keyclaim.link_record import Reward
from keyclaim.util import get_impl


class KeyclaimConfig(ABC):
    """Configuration object for keyclaim"""

    @abstractmethod
    def get_claim_secret(self) -> str:
        """Get the shared secret protected requests must present"""

    @abstractmethod
    def get_default_reward(self) -> Reward:
        """Get the reward for keys issued without an explicit one"""


_config: KeyclaimConfig | None = None


def get_config() -> KeyclaimConfig:
    global _config
    if _config is None:
        from keyclaim.config.default_keyclaim_config import DefaultKeyclaimConfig

        config_type = get_impl(KEYCLAIM_CONFIG, KeyclaimConfig, DefaultKeyclaimConfig)
        _config = config_type()
    return _config


def set_config(config: KeyclaimConfig | None):
    global _config
    _config = config
