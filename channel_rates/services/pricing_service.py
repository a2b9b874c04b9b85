"""
Pricing Calculation Services
============================

Direct price derivation and channel list-price back-solving.

Calculation Flow:
1. Season Base Price (room override or peak price) × Season Multiplier
2. - OBP deduction (missing guests × OBP amount)
3. + Meal plan (per-person price × occupancy)
4. Floor at the minimum viable price, ceiling to a whole unit = Direct Price
5. Direct Price ÷ (Discount Factor × Commission Factor) = List Price (ceiling)
6. List Price → discounts → Sold Price → commission → Estimated Net

Every function here is pure: configuration comes in as domain objects
and GlobalSettings is always an explicit argument.
"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP

from channel_rates.constants import (
    DISCOUNT_KINDS,
    MEAL_BREAKFAST,
    MEAL_FULL,
    MEAL_NONE,
    PROFITABILITY_TOLERANCE,
)
from channel_rates.domain import ChannelCalculation, DiscountProfile, to_decimal
from channel_rates.exceptions import InvalidConfigurationError, InvalidOccupancyError


HUNDRED = Decimal('100')
CENT = Decimal('0.01')


# =============================================================================
# ROUNDING
# =============================================================================

def ceil_price(value):
    """Round up to a whole currency unit. Prices are never rounded down."""
    return int(to_decimal(value).to_integral_value(rounding=ROUND_CEILING))


def round_half_up(value):
    """Round to the nearest whole unit, halves away from zero."""
    return int(to_decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def quantize_money(value):
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


# =============================================================================
# OVERRIDE RESOLUTION
# =============================================================================
# Fallback order for every per-season value:
#     room × season config → room → season → profile default

def _seasonal_config(room, season_id):
    return room.seasonal_config.get(season_id)


def resolve_season_base_price(room, season_id):
    """Season-specific base price, else the peak price."""
    override = room.season_base_prices.get(season_id)
    if override is not None:
        return to_decimal(override)
    return to_decimal(room.base_price_peak)


def resolve_min_obp_occupancy(room, season_id):
    config = _seasonal_config(room, season_id)
    if config is not None and config.min_obp_occupancy is not None:
        return config.min_obp_occupancy
    if room.min_obp_occupancy is not None:
        return room.min_obp_occupancy
    return 1


def resolve_obp_amount(room, season, settings):
    """OBP deduction per missing guest."""
    config = _seasonal_config(room, season.id)
    if config is not None and config.obp_per_person is not None:
        return to_decimal(config.obp_per_person)
    if room.obp_per_person is not None:
        return to_decimal(room.obp_per_person)
    if season.obp_per_person is not None:
        return to_decimal(season.obp_per_person)
    return to_decimal(settings.default_obp_per_person)


def is_obp_active(room, season, settings):
    """OBP applies only when the profile, the season and the room all allow it."""
    return (
        settings.obp_enabled
        and season.obp_enabled
        and room.seasonal_obp_active.get(season.id, True)
    )


def resolve_meal_option(room, season_id):
    return room.seasonal_meal_option.get(season_id) or MEAL_NONE


def resolve_meal_price(room, season_id, option, settings):
    """Per-person price of a meal option for this room and season."""
    if option == MEAL_NONE:
        return Decimal('0')

    config = _seasonal_config(room, season_id)
    if option == MEAL_BREAKFAST:
        candidates = (
            config.breakfast_price if config else None,
            room.breakfast_price,
            settings.default_breakfast_price,
        )
    elif option == MEAL_FULL:
        candidates = (
            config.full_board_price if config else None,
            room.full_board_price,
            settings.default_full_board_price,
        )
    else:
        raise InvalidConfigurationError(
            f"Unknown meal option '{option}'", object_type='room', object_id=room.id
        )

    for value in candidates:
        if value is not None:
            return to_decimal(value)
    return Decimal('0')


def resolve_discount_profile(channel, season_id):
    """Season discount profile if the channel defines one, else its base profile."""
    profile = channel.season_discounts.get(season_id)
    if profile is None:
        profile = channel.discounts or DiscountProfile()
    return profile


def resolve_discount_percentages(channel, season_id):
    """
    Effective percentage per discount kind.

    A disabled discount counts as 0. Kinds missing from the
    configuration count as 0.

    Returns:
        dict: {kind: Decimal percentage} in canonical order
    """
    profile = resolve_discount_profile(channel, season_id)
    return {kind: profile.get(kind).effective_percent for kind in DISCOUNT_KINDS}


# =============================================================================
# VALIDATION GUARDS
# =============================================================================

def check_room(room):
    if room.max_occupancy is None or room.max_occupancy < 1:
        raise InvalidConfigurationError(
            f"Room '{room.name}' must allow at least 1 guest (max_occupancy={room.max_occupancy})",
            object_type='room', object_id=room.id,
        )


def check_season(season):
    if to_decimal(season.multiplier) <= 0:
        raise InvalidConfigurationError(
            f"Season '{season.name}' multiplier must be positive (got {season.multiplier})",
            object_type='season', object_id=season.id,
        )


def check_occupancy(room, occupancy):
    if occupancy < 1 or occupancy > room.max_occupancy:
        raise InvalidOccupancyError(
            f"Occupancy {occupancy} outside 1..{room.max_occupancy} for room '{room.name}'"
        )


def calculate_channel_factors(channel, season_id):
    """
    Resolve a channel's discount stack and commission into factors.

    Returns:
        tuple: (percentages dict, discount_factor, commission_factor)

    Raises:
        InvalidConfigurationError: a percentage is outside 0-100, the
            nominal deductions add up to 100% or more, or the retained
            factor is not strictly positive.
    """
    percentages = resolve_discount_percentages(channel, season_id)
    commission_pct = to_decimal(channel.commission_pct or 0)

    for label, pct in list(percentages.items()) + [('commission', commission_pct)]:
        if pct < 0 or pct > HUNDRED:
            raise InvalidConfigurationError(
                f"Channel '{channel.name}' {label} percentage {pct} is outside 0-100",
                object_type='channel', object_id=channel.id,
            )

    total_deduction = sum(percentages.values(), Decimal('0')) + commission_pct
    if total_deduction >= HUNDRED:
        raise InvalidConfigurationError(
            f"Channel '{channel.name}' discounts and commission total {total_deduction}% "
            f"for season {season_id}",
            object_type='channel', object_id=channel.id,
        )

    discount_factor = Decimal('1')
    for pct in percentages.values():
        discount_factor *= (1 - pct / HUNDRED)
    commission_factor = 1 - commission_pct / HUNDRED

    if discount_factor * commission_factor <= 0:
        raise InvalidConfigurationError(
            f"Channel '{channel.name}' leaves no retained revenue for season {season_id}",
            object_type='channel', object_id=channel.id,
        )

    return percentages, discount_factor, commission_factor


# =============================================================================
# PRICE DERIVATION
# =============================================================================

def calculate_obp_deduction(room, season, occupancy, settings):
    """
    Deduction for guests below maximum occupancy.

    The effective occupancy is floored at the room's minimum OBP
    occupancy, so bookings below that threshold are charged as if
    the threshold were met.
    """
    if not is_obp_active(room, season, settings):
        return Decimal('0')

    effective_occupancy = max(occupancy, resolve_min_obp_occupancy(room, season.id))
    missing = max(0, room.max_occupancy - effective_occupancy)
    if missing == 0:
        return Decimal('0')
    return missing * resolve_obp_amount(room, season, settings)


def calculate_meal_supplement(room, season, occupancy, settings):
    if not settings.meal_plans_enabled:
        return Decimal('0')
    option = resolve_meal_option(room, season.id)
    return resolve_meal_price(room, season.id, option, settings) * occupancy


def calculate_direct_price(room, season, occupancy, settings):
    """
    Owner's net asking price for one room, season and occupancy.

    Args:
        room: Room
        season: Season
        occupancy: int in [1, room.max_occupancy]
        settings: GlobalSettings

    Returns:
        int: direct price, never below settings.min_price

    Raises:
        InvalidConfigurationError: bad room or season configuration
        InvalidOccupancyError: occupancy out of range
    """
    check_room(room)
    check_season(season)
    check_occupancy(room, occupancy)

    price = resolve_season_base_price(room, season.id) * to_decimal(season.multiplier)
    price -= calculate_obp_deduction(room, season, occupancy, settings)
    price += calculate_meal_supplement(room, season, occupancy, settings)

    # Sanity floor, keeps zero/negative prices out of the channel solver
    price = max(price, to_decimal(settings.min_price))

    return ceil_price(price)


# =============================================================================
# CHANNEL BACK-SOLVER
# =============================================================================

def _discount_breakdown(list_price, percentages):
    """
    Amount of each discount, taken on the price left after the prior steps.

    Order: mobile, genius, seasonal, then first-minute + last-minute as
    one combined step (first-minute taken first inside it).
    """
    running = Decimal(list_price)
    breakdown = {}
    for kind in DISCOUNT_KINDS:
        amount = running * percentages[kind] / HUNDRED
        breakdown[kind] = amount
        running -= amount
    return breakdown, running


def _pif_price(amount, tier):
    return ceil_price(to_decimal(amount) * (1 - Decimal(tier) / HUNDRED))


def calculate_channel_price(direct_price, channel, season_id):
    """
    Reverse-solve the list price a channel must display.

    The owner must net at least direct_price after the channel's
    discounts (applied multiplicatively) and its commission (applied
    on the sold price):

        List Price = Direct Price / (Discount Factor × Commission Factor)

    The list price is rounded up, then the realized figures are
    recomputed forward from the rounded value.

    Args:
        direct_price: int/Decimal, the owner's required net
        channel: Channel
        season_id: str, selects season-specific discounts

    Returns:
        ChannelCalculation

    Raises:
        InvalidConfigurationError: the channel stack leaves nothing to retain
    """
    direct = to_decimal(direct_price)
    percentages, discount_factor, commission_factor = calculate_channel_factors(
        channel, season_id
    )
    retained_factor = discount_factor * commission_factor

    list_price = ceil_price(direct / retained_factor)

    # Forward pass from the rounded list price
    breakdown, sold_price = _discount_breakdown(list_price, percentages)
    commission_amount = sold_price * (1 - commission_factor)
    estimated_net = sold_price - commission_amount

    return ChannelCalculation(
        list_price=list_price,
        estimated_net=quantize_money(estimated_net),
        commission=quantize_money(commission_amount),
        is_profitable=estimated_net >= direct - PROFITABILITY_TOLERANCE,
        discount_breakdown={kind: quantize_money(v) for kind, v in breakdown.items()},
        discount_percentages=percentages,
        pif5=_pif_price(sold_price, 5),
        pif10=_pif_price(sold_price, 10),
        pif5_direct=_pif_price(direct, 5),
        pif10_direct=_pif_price(direct, 10),
    )


# =============================================================================
# REVERSE CALCULATOR
# =============================================================================

def calculate_required_base_price(target_net, room, season, occupancy, channels, settings):
    """
    Work backwards from the net an owner wants to the base price needed.

    Treats target_net as the direct price for this room/season/occupancy,
    solves the season base price that would produce it, and shows what
    every channel must list to deliver the same net.

    Returns:
        dict with:
            - target_net
            - occupancy
            - obp_deduction
            - meal_supplement
            - required_base_price (int, rounded half up)
            - channels: {channel_id: ChannelCalculation}
            - errors: {channel_id: message}
    """
    check_room(room)
    check_season(season)
    check_occupancy(room, occupancy)

    target = to_decimal(target_net)
    obp_deduction = calculate_obp_deduction(room, season, occupancy, settings)
    meal_supplement = calculate_meal_supplement(room, season, occupancy, settings)
    required = (target + obp_deduction - meal_supplement) / to_decimal(season.multiplier)

    results = {}
    errors = {}
    for channel in channels:
        try:
            results[channel.id] = calculate_channel_price(target, channel, season.id)
        except InvalidConfigurationError as e:
            errors[channel.id] = e.message

    return {
        'target_net': target,
        'occupancy': occupancy,
        'obp_deduction': obp_deduction,
        'meal_supplement': meal_supplement,
        'required_base_price': round_half_up(required),
        'channels': results,
        'errors': errors,
    }
