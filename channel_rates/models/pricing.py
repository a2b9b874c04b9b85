"""
Pricing models: Season, RoomType, RoomTypeSeasonConfig, Channel,
ChannelSeasonDiscount.

Every model converts itself into an engine value object with
``to_domain()``; the calculation services never see model instances.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from channel_rates.constants import (
    DEFAULT_DISCOUNT_LABELS,
    DIRECT_PRICE_ERROR_KEY,
    DISCOUNT_KINDS,
    MEAL_NONE,
    MEAL_OPTION_CHOICES,
)
from channel_rates.domain import (
    Channel as ChannelConfig,
    Discount,
    DiscountProfile,
    Room,
    Season as SeasonConfig,
    SeasonalRoomConfig,
)
from channel_rates.exceptions import InvalidConfigurationError
from channel_rates.services.pricing_service import calculate_channel_factors

from .core import Profile


PERCENT_VALIDATORS = [MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('100.00'))]

DISCOUNT_FIELDS = [
    name
    for kind in DISCOUNT_KINDS
    for name in (f'{kind}_percent', f'{kind}_enabled')
]


# =============================================================================
# SEASONS & ROOMS
# =============================================================================

class Season(models.Model):
    """
    Pricing season with date range and price multiplier.

    Example:
        Pre-Peak: May 6 - Jun 25, multiplier 0.85, min. 2 nights
        Peak: Jul 3 - Aug 17, multiplier 1.00, min. 5 nights
    """
    profile = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='seasons',
        help_text="Profile this season belongs to"
    )
    name = models.CharField(max_length=100, help_text="e.g., Pre-Peak, Peak")
    start_date = models.DateField()
    end_date = models.DateField()
    multiplier = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        default=Decimal('1.00'),
        validators=[MinValueValidator(Decimal('0.01')), MaxValueValidator(Decimal('5.00'))],
        help_text="Applied to the room base price (1.00 = peak price)"
    )
    min_nights = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text="Minimum length of stay"
    )

    obp_enabled = models.BooleanField(
        default=True,
        help_text="Apply OBP deductions in this season"
    )
    obp_per_person = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="OBP amount for this season (blank = profile default)"
    )

    class Meta:
        ordering = ['profile', 'start_date', 'pk']
        verbose_name = "Season"
        verbose_name_plural = "Seasons"

    def __str__(self):
        return f"{self.name} ({self.start_date} - {self.end_date})"

    def clean(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError({'end_date': "Season cannot end before it starts."})

    def date_range_display(self):
        return f"{self.start_date.strftime('%b %d')} - {self.end_date.strftime('%b %d')}"

    def to_domain(self):
        return SeasonConfig(
            id=str(self.pk),
            name=self.name,
            start_date=self.start_date,
            end_date=self.end_date,
            multiplier=self.multiplier,
            min_nights=self.min_nights,
            obp_enabled=self.obp_enabled,
            obp_per_person=self.obp_per_person,
        )


class RoomType(models.Model):
    """
    Room category priced by the engine.

    base_price_peak is the price at full occupancy in a multiplier 1.00
    season; per-season overrides live on RoomTypeSeasonConfig.
    """
    profile = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='room_types',
        help_text="Profile this room type belongs to"
    )
    name = models.CharField(max_length=100, help_text="e.g., Studio, Cottage")

    max_occupancy = models.PositiveIntegerField(
        default=2,
        validators=[MinValueValidator(1)],
        help_text="Maximum number of guests"
    )
    units = models.PositiveIntegerField(
        default=1,
        help_text="Number of rooms of this type"
    )
    base_price_peak = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Price per night at maximum occupancy in peak season"
    )

    # OBP
    obp_per_person = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="OBP deduction per missing guest (blank = season/profile default)"
    )
    min_obp_occupancy = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        help_text="Guests below this count are charged as this count"
    )

    # Meal plans
    breakfast_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Breakfast price per person (blank = profile default)"
    )
    full_board_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Full board price per person (blank = profile default)"
    )

    hotres_type_id = models.CharField(
        max_length=20,
        blank=True,
        default='',
        help_text="Room type id in the Hotres panel"
    )
    sort_order = models.PositiveIntegerField(default=0, help_text="Display order")

    class Meta:
        ordering = ['profile', 'sort_order', 'name']
        verbose_name = "Room Type"
        verbose_name_plural = "Room Types"

    def __str__(self):
        return f"{self.name} (max {self.max_occupancy})"

    def clean(self):
        if (self.min_obp_occupancy and self.max_occupancy
                and self.min_obp_occupancy > self.max_occupancy):
            raise ValidationError({
                'min_obp_occupancy': "Minimum OBP occupancy cannot exceed maximum occupancy."
            })

    def to_domain(self):
        """
        Room value object with all per-season overrides.

        Reads season_configs, so prefetch it when converting many rooms.
        """
        base_prices = {}
        obp_active = {}
        meal_options = {}
        configs = {}
        comments = {}
        occupancy = {}

        for config in self.season_configs.all():
            season_id = str(config.season_id)
            if config.base_price is not None:
                base_prices[season_id] = config.base_price
            obp_active[season_id] = config.obp_active
            meal_options[season_id] = config.meal_option
            configs[season_id] = config.to_domain()
            if config.comment:
                comments[season_id] = config.comment
            if config.occupancy_rate is not None:
                occupancy[season_id] = config.occupancy_rate

        return Room(
            id=str(self.pk),
            name=self.name,
            max_occupancy=self.max_occupancy,
            base_price_peak=self.base_price_peak,
            units=self.units,
            hotres_type_id=self.hotres_type_id,
            season_base_prices=base_prices,
            obp_per_person=self.obp_per_person,
            min_obp_occupancy=self.min_obp_occupancy,
            seasonal_obp_active=obp_active,
            breakfast_price=self.breakfast_price,
            full_board_price=self.full_board_price,
            seasonal_meal_option=meal_options,
            seasonal_config=configs,
            season_comments=comments,
            season_occupancy=occupancy,
            sort_order=self.sort_order,
        )


class RoomTypeSeasonConfig(models.Model):
    """
    Per-room-type, per-season overrides.

    Blank values fall back to the room type, then the season, then the
    profile defaults. Rows are auto-created by signals for every
    room type × season pair.
    """
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='season_configs',
    )
    season = models.ForeignKey(
        Season,
        on_delete=models.CASCADE,
        related_name='room_configs',
    )

    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Base price in this season (blank = peak price)"
    )
    obp_active = models.BooleanField(
        default=True,
        help_text="Apply OBP to this room in this season"
    )
    obp_per_person = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    min_obp_occupancy = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
    )
    meal_option = models.CharField(
        max_length=20,
        choices=MEAL_OPTION_CHOICES,
        default=MEAL_NONE,
    )
    breakfast_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    full_board_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
    )

    comment = models.CharField(max_length=200, blank=True, default='')
    occupancy_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=PERCENT_VALIDATORS,
        help_text="Last occupancy % read from Hotres (informational)"
    )

    class Meta:
        ordering = ['season__start_date', 'room_type__sort_order']
        verbose_name = "Room Type Season Config"
        verbose_name_plural = "Room Type Season Configs"
        unique_together = ['room_type', 'season']

    def __str__(self):
        return f"{self.room_type.name} × {self.season.name}"

    def to_domain(self):
        return SeasonalRoomConfig(
            obp_per_person=self.obp_per_person,
            min_obp_occupancy=self.min_obp_occupancy,
            breakfast_price=self.breakfast_price,
            full_board_price=self.full_board_price,
        )


# =============================================================================
# CHANNELS & DISCOUNTS
# =============================================================================

class DiscountStack(models.Model):
    """Percentage and on/off switch for each of the five discount kinds."""
    mobile_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS
    )
    mobile_enabled = models.BooleanField(default=True)
    genius_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS
    )
    genius_enabled = models.BooleanField(default=True)
    seasonal_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS
    )
    seasonal_enabled = models.BooleanField(default=True)
    first_minute_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS
    )
    first_minute_enabled = models.BooleanField(default=True)
    last_minute_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS
    )
    last_minute_enabled = models.BooleanField(default=True)

    class Meta:
        abstract = True

    def discount_values(self):
        """{field_name: value} for every discount field."""
        return {name: getattr(self, name) for name in DISCOUNT_FIELDS}

    def to_discount_profile(self):
        return DiscountProfile(**{
            kind: Discount(
                percent=getattr(self, f'{kind}_percent'),
                enabled=getattr(self, f'{kind}_enabled'),
            )
            for kind in DISCOUNT_KINDS
        })

    def total_discount_percent(self):
        """Sum of enabled discount percentages (nominal, not compounded)."""
        return sum(
            (getattr(self, f'{kind}_percent') for kind in DISCOUNT_KINDS
             if getattr(self, f'{kind}_enabled')),
            Decimal('0.00'),
        )


class Channel(DiscountStack):
    """
    Sales channel (direct OTA or listing site) with commission and a
    base discount stack.

    Example:
        Booking.com: 20% commission, mobile 10%, genius 10%
        Airbnb: 16% commission, first minute 15%
    """
    profile = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='channels',
        help_text="Profile this channel belongs to"
    )
    code = models.SlugField(
        max_length=50,
        help_text="Identifier used in grids and exports (e.g., 'booking')"
    )
    name = models.CharField(max_length=100, help_text="e.g., Booking.com")
    commission_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=PERCENT_VALIDATORS,
        help_text="Commission taken on the sold price"
    )
    color = models.CharField(max_length=7, blank=True, default='', help_text="Hex display color")
    hotres_rate_id = models.CharField(
        max_length=20,
        blank=True,
        default='',
        help_text="Rate id in the Hotres panel (blank = not pushed)"
    )
    discount_labels = models.JSONField(
        default=dict,
        blank=True,
        help_text="Custom display names per discount kind, e.g. {\"seasonal\": \"Early Summer\"}"
    )

    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0, help_text="Display order")

    class Meta:
        ordering = ['profile', 'sort_order', 'name']
        unique_together = ['profile', 'code']
        verbose_name = "Channel"
        verbose_name_plural = "Channels"

    def __str__(self):
        return f"{self.name} ({self.commission_percent}%)"

    def commission_display(self):
        return f"{self.commission_percent}%"

    def get_discount_labels(self):
        labels = dict(DEFAULT_DISCOUNT_LABELS)
        labels.update({k: v for k, v in (self.discount_labels or {}).items() if k in labels and v})
        return labels

    def clean(self):
        if self.code == DIRECT_PRICE_ERROR_KEY:
            raise ValidationError({'code': f"'{self.code}' is a reserved code"})

        unknown = set(self.discount_labels or {}) - set(DISCOUNT_KINDS)
        if unknown:
            raise ValidationError({
                'discount_labels': f"Unknown discount kinds: {', '.join(sorted(unknown))}"
            })

        base_only = ChannelConfig(
            id=self.code or 'new',
            name=self.name,
            commission_pct=self.commission_percent or Decimal('0'),
            discounts=self.to_discount_profile(),
        )
        try:
            calculate_channel_factors(base_only, None)
        except InvalidConfigurationError as e:
            raise ValidationError(e.message)

    def to_domain(self):
        """
        Channel value object with its season discount profiles.

        Reads season_discounts, so prefetch it when converting many channels.
        """
        return ChannelConfig(
            id=self.code,
            name=self.name,
            commission_pct=self.commission_percent,
            discounts=self.to_discount_profile(),
            season_discounts={
                str(sd.season_id): sd.to_discount_profile()
                for sd in self.season_discounts.all()
            },
            color=self.color,
            hotres_rate_id=self.hotres_rate_id,
            discount_labels=self.get_discount_labels(),
        )


class ChannelSeasonDiscount(DiscountStack):
    """
    Season-specific discount stack of a channel.

    Created from the channel's base stack and kept in sync with it until
    edited; an edited row is flagged is_customized and left alone.
    """
    channel = models.ForeignKey(
        Channel,
        on_delete=models.CASCADE,
        related_name='season_discounts'
    )
    season = models.ForeignKey(
        Season,
        on_delete=models.CASCADE,
        related_name='channel_discounts'
    )
    is_customized = models.BooleanField(default=False)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['season__start_date', 'channel__sort_order']
        verbose_name = "Channel Season Discount"
        verbose_name_plural = "Channel Season Discounts"
        unique_together = ['channel', 'season']

    def __str__(self):
        return f"{self.channel.name} → {self.season.name}: -{self.total_discount_percent()}%"

    def clean(self):
        season_stack = ChannelConfig(
            id=self.channel.code,
            name=self.channel.name,
            commission_pct=self.channel.commission_percent,
            season_discounts={'season': self.to_discount_profile()},
        )
        try:
            calculate_channel_factors(season_stack, 'season')
        except InvalidConfigurationError as e:
            raise ValidationError(e.message)

    def save(self, *args, **kwargs):
        if self.pk and self.discount_values() != self.channel.discount_values():
            self.is_customized = True
        super().save(*args, **kwargs)

    def _copy_base(self):
        for name, value in self.channel.discount_values().items():
            setattr(self, name, value)

    def sync_from_base(self):
        if not self.is_customized:
            self._copy_base()
            super().save()

    def reset_to_base(self):
        self._copy_base()
        self.is_customized = False
        super().save()
