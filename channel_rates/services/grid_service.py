"""
Pricing grid assembly.

Builds the rooms × seasons matrix (and the per-room occupancy ladder)
on top of pricing_service. Each cell is computed independently: a bad
season or channel is recorded on its row and the rest of the grid is
still produced.
"""

import logging
from collections import Counter

from channel_rates.constants import DIRECT_PRICE_ERROR_KEY, MAX_OCCUPANCY
from channel_rates.domain import PricingRow
from channel_rates.exceptions import InvalidConfigurationError, PricingError
from channel_rates.services.pricing_service import (
    calculate_channel_factors,
    calculate_channel_price,
    calculate_direct_price,
    check_room,
    check_season,
    resolve_discount_percentages,
    resolve_season_base_price,
)

logger = logging.getLogger(__name__)


def resolve_row_occupancy(room, occupancy=MAX_OCCUPANCY, override=None):
    """
    Occupancy to price a row at.

    Priority: per-row override, then the fixed grid occupancy, then the
    room's maximum. The result never exceeds room.max_occupancy and is
    never below 1.
    """
    if override is not None:
        target = override
    elif occupancy == MAX_OCCUPANCY:
        target = room.max_occupancy
    else:
        target = min(occupancy, room.max_occupancy)
    return max(1, min(target, room.max_occupancy))


def build_pricing_row(room, season, channels, settings, occupancy):
    """
    Price one (room, season, occupancy) cell for every channel.

    Never raises PricingError: failures are stored in row.errors keyed
    by 'direct_price' or by channel id.
    """
    errors = {}
    calculations = {}

    try:
        direct_price = calculate_direct_price(room, season, occupancy, settings)
    except PricingError as e:
        logger.warning(
            "Direct price failed for room=%s season=%s occupancy=%s: %s",
            room.id, season.id, occupancy, e,
        )
        direct_price = None
        errors[DIRECT_PRICE_ERROR_KEY] = str(e)

    if direct_price is not None:
        for channel in channels:
            try:
                calculations[channel.id] = calculate_channel_price(
                    direct_price, channel, season.id
                )
            except PricingError as e:
                logger.warning(
                    "Channel price failed for channel=%s room=%s season=%s: %s",
                    channel.id, room.id, season.id, e,
                )
                errors[channel.id] = str(e)

    return PricingRow(
        room_id=room.id,
        season_id=season.id,
        room_name=room.name,
        season_name=season.name,
        base_price=resolve_season_base_price(room, season.id),
        min_nights=season.min_nights,
        occupancy=occupancy,
        max_occupancy=room.max_occupancy,
        direct_price=direct_price,
        channel_calculations=calculations,
        errors=errors,
        comment=room.season_comments.get(season.id, ''),
        occupancy_rate=room.season_occupancy.get(season.id),
    )


def generate_pricing_grid(rooms, seasons, channels, settings,
                          occupancy=MAX_OCCUPANCY, overrides=None):
    """
    Full pricing grid, one row per (room, season).

    Args:
        rooms: list of Room
        seasons: list of Season
        channels: list of Channel
        settings: GlobalSettings
        occupancy: MAX_OCCUPANCY or a fixed int >= 1
        overrides: optional {(room_id, season_id): occupancy} for single rows

    Returns:
        list of PricingRow, room-major then season-minor in input order
    """
    if occupancy != MAX_OCCUPANCY and occupancy < 1:
        raise ValueError(f"Grid occupancy must be >= 1 or '{MAX_OCCUPANCY}', got {occupancy}")

    overrides = overrides or {}
    grid = []

    for room in rooms:
        for season in seasons:
            if room.max_occupancy is None or room.max_occupancy < 1:
                row_occupancy = room.max_occupancy
            else:
                row_occupancy = resolve_row_occupancy(
                    room, occupancy, overrides.get((room.id, season.id))
                )
            grid.append(build_pricing_row(room, season, channels, settings, row_occupancy))

    return grid


def calculate_occupancy_ladder(room, season, channels, settings):
    """
    Price one room/season at every occupancy from 1 to max_occupancy.

    Used by the reverse calculator and the Hotres price push.

    Raises:
        InvalidConfigurationError: the room or season cannot be priced at all
    """
    check_room(room)
    check_season(season)
    return [
        build_pricing_row(room, season, channels, settings, occupancy)
        for occupancy in range(1, room.max_occupancy + 1)
    ]


def validate_configuration(rooms, seasons, channels):
    """
    Report every configuration problem without computing prices.

    Returns:
        list of dicts with keys: type, object_type, object_id, message
    """
    issues = []

    def add(issue_type, object_type, object_id, message):
        issues.append({
            'type': issue_type,
            'object_type': object_type,
            'object_id': object_id,
            'message': message,
        })

    for room in rooms:
        try:
            check_room(room)
        except InvalidConfigurationError as e:
            add('invalid_configuration', 'room', room.id, e.message)

    counts = Counter(season.id for season in seasons)
    for season_id, count in counts.items():
        if count > 1:
            add('duplicate_id', 'season', season_id,
                f"Season id '{season_id}' is used {count} times")

    for season in seasons:
        try:
            check_season(season)
        except InvalidConfigurationError as e:
            add('invalid_configuration', 'season', season.id, e.message)
        if season.start_date > season.end_date:
            add('invalid_date_range', 'season', season.id,
                f"Season '{season.name}' ends before it starts")

    for channel in channels:
        if channel.id == DIRECT_PRICE_ERROR_KEY:
            add('reserved_id', 'channel', channel.id,
                f"Channel id '{channel.id}' is reserved for direct price errors")
        # seasons sharing a discount stack fail the same way; report it once
        checked = set()
        for season in seasons:
            stack = tuple(sorted(resolve_discount_percentages(channel, season.id).items()))
            if stack in checked:
                continue
            checked.add(stack)
            try:
                calculate_channel_factors(channel, season.id)
            except InvalidConfigurationError as e:
                add('invalid_configuration', 'channel', channel.id, e.message)

    return issues
