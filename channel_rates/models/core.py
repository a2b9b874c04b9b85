"""
Core models: Property and pricing Profile.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models, transaction

from channel_rates.constants import (
    DEFAULT_BREAKFAST_PRICE,
    DEFAULT_FULL_BOARD_PRICE,
    DEFAULT_OBP_PER_PERSON,
    MIN_PRICE,
)
from channel_rates.domain import GlobalSettings

# =============================================================================
# PROPERTY & PROFILE
# =============================================================================

class Property(models.Model):
    """
    A hotel or guest house priced by this engine.

    Example: "Villa Baltica" with Hotres object id 1234
    """
    name = models.CharField(
        max_length=200,
        help_text="Property name"
    )
    code = models.SlugField(
        max_length=50,
        unique=True,
        help_text="URL-friendly code (e.g., 'villa-baltica')"
    )

    hotres_object_id = models.CharField(
        max_length=20,
        blank=True,
        default='',
        help_text="Object id (oid) in the Hotres panel"
    )

    currency_symbol = models.CharField(
        max_length=5,
        default='zł',
        help_text="Currency symbol to display"
    )

    notes = models.TextField(blank=True, default='')
    sort_order = models.PositiveIntegerField(default=0, help_text="Display order")

    # Status
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this property is active"
    )

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'name']
        verbose_name = "Property"
        verbose_name_plural = "Properties"

    def __str__(self):
        return self.name

    def get_default_profile(self):
        """Default profile, else the oldest one, else None."""
        profile = self.profiles.filter(is_default=True).first()
        if profile is None:
            profile = self.profiles.order_by('created_at', 'pk').first()
        return profile


class Profile(models.Model):
    """
    A named pricing configuration of a property.

    Holds the profile-wide switches and defaults (GlobalSettings) and owns
    its seasons, room types and channels. A property can keep several
    profiles (e.g. "2025", "2026 draft"); one of them is the default.
    """
    hotel = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name='profiles',
        help_text="Property this profile belongs to"
    )
    name = models.CharField(max_length=100, help_text="e.g., Summer 2025")
    is_default = models.BooleanField(
        default=False,
        help_text="Profile used when none is requested explicitly"
    )

    # OBP (occupancy based pricing)
    obp_enabled = models.BooleanField(
        default=True,
        help_text="Deduct an amount per guest below maximum occupancy"
    )
    default_obp_per_person = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=DEFAULT_OBP_PER_PERSON,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="OBP deduction per missing guest when room and season set none"
    )

    # Meal plans
    meal_plans_enabled = models.BooleanField(
        default=False,
        help_text="Add per-person meal prices to the direct price"
    )
    default_breakfast_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=DEFAULT_BREAKFAST_PRICE,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Breakfast price per person"
    )
    default_full_board_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=DEFAULT_FULL_BOARD_PRICE,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Full board price per person"
    )

    min_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=MIN_PRICE,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Direct prices are never lower than this"
    )

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['hotel', '-is_default', 'name']
        unique_together = ['hotel', 'name']
        verbose_name = "Pricing Profile"
        verbose_name_plural = "Pricing Profiles"

    def __str__(self):
        return f"{self.hotel.name} / {self.name}"

    def clean(self):
        if self.min_price is not None and self.min_price <= 0:
            raise ValidationError({'min_price': "Minimum price must be positive."})

    def save(self, *args, **kwargs):
        """Keep at most one default profile per property."""
        with transaction.atomic():
            super().save(*args, **kwargs)
            if self.is_default:
                Profile.objects.filter(
                    hotel=self.hotel, is_default=True
                ).exclude(pk=self.pk).update(is_default=False)

    def to_settings(self):
        """GlobalSettings for the calculation engine."""
        return GlobalSettings(
            obp_enabled=self.obp_enabled,
            default_obp_per_person=self.default_obp_per_person,
            meal_plans_enabled=self.meal_plans_enabled,
            default_breakfast_price=self.default_breakfast_price,
            default_full_board_price=self.default_full_board_price,
            min_price=self.min_price,
        )

    def build_pricing_inputs(self):
        """
        Load the whole profile into engine value objects.

        Returns:
            dict with rooms, seasons, channels (active only) and settings,
            ready to be passed as keyword arguments to generate_pricing_grid.
        """
        seasons = list(self.seasons.all())
        rooms = self.room_types.prefetch_related('season_configs')
        channels = self.channels.filter(is_active=True).prefetch_related('season_discounts')

        return {
            'rooms': [room.to_domain() for room in rooms],
            'seasons': [season.to_domain() for season in seasons],
            'channels': [channel.to_domain() for channel in channels],
            'settings': self.to_settings(),
        }
