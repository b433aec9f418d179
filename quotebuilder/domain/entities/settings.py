"""
Settings Entity - Application-wide defaults for new jobs.
"""
from dataclasses import dataclass
from typing import Optional

from quotebuilder.config import QuoteConfig, get_config


@dataclass(frozen=True)
class Settings:
    """
    Defaults copied onto a job when it is created.

    The totals engine never reads Settings; only job creation does.
    """

    default_surcharge_mode: str = "stacking"
    default_surcharge_percent: float = 0.0

    @classmethod
    def from_config(cls, config: QuoteConfig) -> "Settings":
        return cls(
            default_surcharge_mode=config.default_surcharge_mode,
            default_surcharge_percent=config.default_surcharge_percent,
        )

    def to_dict(self) -> dict:
        return {
            'default_surcharge_mode': self.default_surcharge_mode,
            'default_surcharge_percent': self.default_surcharge_percent,
        }


def load_settings(config: Optional[QuoteConfig] = None) -> Settings:
    """Build Settings from the given config or the configuration singleton."""
    return Settings.from_config(config or get_config())
