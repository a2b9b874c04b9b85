"""
Engine-facing value objects.

These are plain immutable records: the calculation services never read
Django models directly, they receive fully-built Room / Season / Channel /
GlobalSettings instances (see ``Profile.build_pricing_inputs``).

Ids are strings. Per-season overrides are explicit ``{season_id: value}``
lookup tables; a missing key means "no override".
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from .constants import (
    DEFAULT_BREAKFAST_PRICE,
    DEFAULT_FULL_BOARD_PRICE,
    DEFAULT_OBP_PER_PERSON,
    DISCOUNT_KINDS,
    MIN_PRICE,
    OTHER_DISCOUNT_KINDS,
)


def to_decimal(value):
    """Convert int/float/str/Decimal to Decimal without float noise."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _money(value):
    """JSON-friendly representation of a money amount."""
    if value is None:
        return None
    return float(value)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class Discount:
    """One discount kind on a channel: percentage plus on/off switch."""
    percent: Decimal = Decimal('0')
    enabled: bool = True

    @property
    def effective_percent(self) -> Decimal:
        return to_decimal(self.percent) if self.enabled else Decimal('0')


@dataclass(frozen=True)
class DiscountProfile:
    """The five discount kinds a channel can stack."""
    mobile: Discount = field(default_factory=Discount)
    genius: Discount = field(default_factory=Discount)
    seasonal: Discount = field(default_factory=Discount)
    first_minute: Discount = field(default_factory=Discount)
    last_minute: Discount = field(default_factory=Discount)

    def get(self, kind: str) -> Discount:
        if kind not in DISCOUNT_KINDS:
            raise KeyError(kind)
        return getattr(self, kind)

    @classmethod
    def from_percents(cls, **percents):
        """
        Build a profile from keyword percentages, all enabled.

        Example:
            DiscountProfile.from_percents(mobile=10, genius=10)
        """
        unknown = set(percents) - set(DISCOUNT_KINDS)
        if unknown:
            raise KeyError(', '.join(sorted(unknown)))
        return cls(**{
            kind: Discount(percent=to_decimal(value))
            for kind, value in percents.items()
        })


@dataclass(frozen=True)
class GlobalSettings:
    """Profile-wide pricing switches and defaults."""
    obp_enabled: bool = True
    default_obp_per_person: Decimal = DEFAULT_OBP_PER_PERSON
    meal_plans_enabled: bool = False
    default_breakfast_price: Decimal = DEFAULT_BREAKFAST_PRICE
    default_full_board_price: Decimal = DEFAULT_FULL_BOARD_PRICE
    min_price: Decimal = MIN_PRICE


@dataclass(frozen=True)
class SeasonalRoomConfig:
    """Per-season room values that win over the room-level ones."""
    obp_per_person: Optional[Decimal] = None
    min_obp_occupancy: Optional[int] = None
    breakfast_price: Optional[Decimal] = None
    full_board_price: Optional[Decimal] = None


@dataclass(frozen=True)
class Room:
    id: str
    name: str
    max_occupancy: int
    base_price_peak: Decimal
    units: int = 1
    hotres_type_id: str = ''
    season_base_prices: Dict[str, Decimal] = field(default_factory=dict)
    obp_per_person: Optional[Decimal] = None
    min_obp_occupancy: Optional[int] = None
    seasonal_obp_active: Dict[str, bool] = field(default_factory=dict)
    breakfast_price: Optional[Decimal] = None
    full_board_price: Optional[Decimal] = None
    seasonal_meal_option: Dict[str, str] = field(default_factory=dict)
    seasonal_config: Dict[str, SeasonalRoomConfig] = field(default_factory=dict)
    season_comments: Dict[str, str] = field(default_factory=dict)
    season_occupancy: Dict[str, Decimal] = field(default_factory=dict)
    sort_order: int = 0


@dataclass(frozen=True)
class Season:
    id: str
    name: str
    start_date: date
    end_date: date
    multiplier: Decimal = Decimal('1.00')
    min_nights: int = 1
    obp_enabled: bool = True
    obp_per_person: Optional[Decimal] = None


@dataclass(frozen=True)
class Channel:
    id: str
    name: str
    commission_pct: Decimal = Decimal('0')
    discounts: DiscountProfile = field(default_factory=DiscountProfile)
    season_discounts: Dict[str, DiscountProfile] = field(default_factory=dict)
    color: str = ''
    hotres_rate_id: str = ''
    discount_labels: Dict[str, str] = field(default_factory=dict)


# =============================================================================
# DERIVED RESULTS
# =============================================================================

@dataclass(frozen=True)
class ChannelCalculation:
    """Back-solved list price and forward-computed economics for one channel."""
    list_price: int
    estimated_net: Decimal
    commission: Decimal
    is_profitable: bool
    discount_breakdown: Dict[str, Decimal]
    discount_percentages: Dict[str, Decimal]
    pif5: int
    pif10: int
    pif5_direct: int
    pif10_direct: int

    @property
    def total_discount(self) -> Decimal:
        return sum(self.discount_breakdown.values(), Decimal('0'))

    @property
    def other_discount(self) -> Decimal:
        """Combined first-minute + last-minute step."""
        return sum(
            (self.discount_breakdown[kind] for kind in OTHER_DISCOUNT_KINDS),
            Decimal('0'),
        )

    def to_dict(self):
        return {
            'list_price': self.list_price,
            'estimated_net': _money(self.estimated_net),
            'commission': _money(self.commission),
            'is_profitable': self.is_profitable,
            'discount_breakdown': {
                kind: _money(self.discount_breakdown[kind]) for kind in DISCOUNT_KINDS
            },
            'discount_percentages': {
                kind: _money(self.discount_percentages[kind]) for kind in DISCOUNT_KINDS
            },
            'pif5': self.pif5,
            'pif10': self.pif10,
            'pif5_direct': self.pif5_direct,
            'pif10_direct': self.pif10_direct,
        }


@dataclass(frozen=True)
class PricingRow:
    """One (room, season, occupancy) cell of the pricing grid."""
    room_id: str
    season_id: str
    room_name: str
    season_name: str
    base_price: Decimal
    min_nights: int
    occupancy: int
    max_occupancy: int
    direct_price: Optional[int]
    channel_calculations: Dict[str, ChannelCalculation] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    comment: str = ''
    occupancy_rate: Optional[Decimal] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self):
        return {
            'room_id': self.room_id,
            'season_id': self.season_id,
            'room_name': self.room_name,
            'season_name': self.season_name,
            'base_price': _money(self.base_price),
            'min_nights': self.min_nights,
            'occupancy': self.occupancy,
            'max_occupancy': self.max_occupancy,
            'direct_price': self.direct_price,
            'comment': self.comment,
            'occupancy_rate': _money(self.occupancy_rate),
            'channel_calculations': {
                channel_id: calc.to_dict()
                for channel_id, calc in self.channel_calculations.items()
            },
            'errors': dict(self.errors),
        }
