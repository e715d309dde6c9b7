"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import CARDS_PER_HAND, NUM_SEATS


class GameConfig(BaseModel):
    """Configuration for game rules and room housekeeping."""

    min_players: int = Field(
        default=2,
        ge=2,
        le=NUM_SEATS,
        description="Minimum number of occupied seats required to start"
    )
    max_seats: int = Field(
        default=NUM_SEATS,
        ge=NUM_SEATS,
        le=NUM_SEATS,
        description="Seats at the table"
    )
    cards_per_hand: int = Field(
        default=CARDS_PER_HAND,
        ge=CARDS_PER_HAND,
        le=CARDS_PER_HAND,
        description="Cards dealt to each occupied seat"
    )
    settle_delay_ms: int = Field(
        default=5000,
        ge=0,
        le=60000,
        description="Delay between game over and the reset to seating"
    )
    ai_delay_scale: float = Field(
        default=1.0,
        ge=0.0,
        le=10.0,
        description="Multiplier applied to persona think delays (0 = immediate)"
    )
    room_timeout: int = Field(
        default=3600,
        ge=60,
        le=86400,
        description="Room inactivity timeout in seconds"
    )
    reap_interval: int = Field(
        default=300,
        ge=10,
        le=3600,
        description="Seconds between idle-room sweeps"
    )
    default_persona: str = Field(
        default="marcus",
        min_length=1,
        description="Persona used when an unknown persona is requested"
    )

    @field_validator('reap_interval')
    @classmethod
    def validate_reap_interval(cls, v, info):
        """The sweep must run at least once per timeout window."""
        room_timeout = info.data.get('room_timeout', 3600)
        if v > room_timeout:
            raise ValueError(f'reap_interval ({v}) must be <= room_timeout ({room_timeout})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_seats


# Default configuration instance
default_config = GameConfig()


def create_config(**overrides) -> GameConfig:
    """Create a GameConfig with optional overrides."""
    config_dict = default_config.model_dump()
    config_dict.update(overrides)
    return GameConfig(**config_dict)
