"""
Channel rates models package.

Re-exports all models so migrations and imports work unchanged:
    from channel_rates.models import Season, RoomType, Channel
"""

# Core: Property and pricing profile
from .core import (
    Property,
    Profile,
)

# Pricing: seasons, rooms, channels, per-season overrides
from .pricing import (
    Season,
    RoomType,
    RoomTypeSeasonConfig,
    Channel,
    ChannelSeasonDiscount,
)

__all__ = [
    # Core
    'Property', 'Profile',
    # Pricing
    'Season', 'RoomType', 'RoomTypeSeasonConfig', 'Channel', 'ChannelSeasonDiscount',
]
