"""
Auction configuration parameters.

Defines the timing windows, minimum bid and increment rate used by the
engine. Defaults mirror the contract constants; deployments can override
them from a JSON file or FEEAUCTION_* environment variables (a .env file
in the working directory is loaded first).
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, model_validator

# =============================================================================
# Contract constants
# =============================================================================

MIN_TTL = 12 * 60 * 60       # 12 hours
MAX_TTL = 3 * 24 * 60 * 60   # 3 days
BID_MIN = 1000               # raw bid-token units
INCREMENT_BPS = 1            # 0.1% ...
DENOMINATOR = 1000           # ... of the previous bid

ENV_PREFIX = "FEEAUCTION_"


@dataclass
class AuctionConfig:
    """Engine-wide configuration parameters"""

    # Bidding windows (seconds)
    min_ttl: int = MIN_TTL          # Rolling window restarted by every bid
    max_ttl: int = MAX_TTL          # Hard deadline from auction start

    # Amounts
    bid_min: int = BID_MIN          # Minimum opening bid
    increment_bps: int = INCREMENT_BPS
    denominator: int = DENOMINATOR

    # Paths
    log_dir: Path = Path("logs")

    def min_increment(self, previous: int) -> int:
        """Floor-division increment required on top of the previous bid."""
        return previous * self.increment_bps // self.denominator

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["log_dir"] = str(self.log_dir)
        return data


class AuctionConfigModel(BaseModel):
    """Validation schema for externally supplied configuration."""

    min_ttl: int = Field(default=MIN_TTL, gt=0)
    max_ttl: int = Field(default=MAX_TTL, gt=0)
    bid_min: int = Field(default=BID_MIN, gt=0)
    increment_bps: int = Field(default=INCREMENT_BPS, ge=0)
    denominator: int = Field(default=DENOMINATOR, gt=0)
    log_dir: str = "logs"

    @model_validator(mode="after")
    def check_windows(self) -> "AuctionConfigModel":
        if self.max_ttl < self.min_ttl:
            raise ValueError(f"max_ttl ({self.max_ttl}) must be >= min_ttl ({self.min_ttl})")
        return self

    def to_config(self) -> AuctionConfig:
        return AuctionConfig(
            min_ttl=self.min_ttl,
            max_ttl=self.max_ttl,
            bid_min=self.bid_min,
            increment_bps=self.increment_bps,
            denominator=self.denominator,
            log_dir=Path(self.log_dir),
        )


def _env_overrides() -> Dict[str, str]:
    """Collect FEEAUCTION_* variables keyed by lower-case field name."""
    overrides = {}
    for field_name in AuctionConfigModel.model_fields:
        value = os.getenv(ENV_PREFIX + field_name.upper())
        if value is not None:
            overrides[field_name] = value
    return overrides


def load_config(config_path: Optional[str] = None, use_env: bool = True) -> AuctionConfig:
    """
    Load configuration from file and environment, or use defaults.

    Precedence (highest first): environment, JSON file, defaults.

    Args:
        config_path: Optional path to a JSON config file
        use_env: Whether to read .env and FEEAUCTION_* variables

    Returns:
        AuctionConfig instance

    Raises:
        pydantic.ValidationError: if any value is invalid
    """
    data: Dict[str, Any] = {}

    if config_path:
        data.update(json.loads(Path(config_path).read_text()))

    if use_env:
        load_dotenv(find_dotenv(usecwd=True))
        data.update(_env_overrides())

    return AuctionConfigModel(**data).to_config()
