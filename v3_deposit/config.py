"""
Configuration settings for the deposit engine

Loads environment variables (optionally from a .env file) and provides
engine-wide defaults.
"""
import os
from typing import Dict, Optional
from dotenv import load_dotenv

from .constants import DEFAULT_EFFICIENCY_CAP, TICK_SPACINGS

# Load environment variables from .env file
load_dotenv()


def _parse_fee_tiers(raw: str) -> Dict[int, int]:
    """"2500:50,20000:400" -> {2500: 50, 20000: 400}"""
    tiers: Dict[int, int] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        fee, sep, spacing = item.partition(":")
        if not sep:
            raise ValueError(f"Invalid fee tier entry (expected fee:spacing): {item!r}")
        fee_value, spacing_value = int(fee), int(spacing)
        if fee_value <= 0 or spacing_value <= 0:
            raise ValueError(f"Fee tier and spacing must be positive: {item!r}")
        tiers[fee_value] = spacing_value
    return tiers


class Settings:
    """Engine settings"""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        env = os.environ if environ is None else environ

        # Capital efficiency sentinel cap
        self.EFFICIENCY_CAP: float = float(
            env.get("V3_DEPOSIT_EFFICIENCY_CAP", DEFAULT_EFFICIENCY_CAP)
        )

        # Display precision (display strings are never fed back into the math)
        self.AMOUNT_DISPLAY_PLACES: int = int(env.get("V3_DEPOSIT_AMOUNT_DISPLAY_PLACES", 8))
        self.PRICE_DISPLAY_PLACES: int = int(env.get("V3_DEPOSIT_PRICE_DISPLAY_PLACES", 6))

        # Extra fee tiers, e.g. "2500:50" for PancakeSwap-style pools
        self.EXTRA_FEE_TIERS: Dict[int, int] = _parse_fee_tiers(
            env.get("V3_DEPOSIT_EXTRA_FEE_TIERS", "")
        )

        if self.EFFICIENCY_CAP <= 1:
            raise ValueError("V3_DEPOSIT_EFFICIENCY_CAP must be greater than 1")
        if self.AMOUNT_DISPLAY_PLACES < 0 or self.PRICE_DISPLAY_PLACES < 0:
            raise ValueError("Display places must be non-negative")

    @property
    def tick_spacings(self) -> Dict[int, int]:
        """Built-in fee tiers merged with configured extras"""
        spacings = dict(TICK_SPACINGS)
        spacings.update(self.EXTRA_FEE_TIERS)
        return spacings


# Global settings instance
settings = Settings()
