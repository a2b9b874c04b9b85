"""
Channel rates admin configuration.

Property → Profile → Season / RoomType / Channel, with the per-season
override rows editable inline.
"""

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import (
    Property, Profile,
    Season, RoomType, RoomTypeSeasonConfig, Channel, ChannelSeasonDiscount,
)


DISCOUNT_FIELDSET_FIELDS = (
    ('mobile_percent', 'mobile_enabled'),
    ('genius_percent', 'genius_enabled'),
    ('seasonal_percent', 'seasonal_enabled'),
    ('first_minute_percent', 'first_minute_enabled'),
    ('last_minute_percent', 'last_minute_enabled'),
)


# =============================================================================
# PROPERTY & PROFILE ADMIN
# =============================================================================

class ProfileInline(admin.TabularInline):
    """Inline for profiles within a property."""
    model = Profile
    extra = 0
    fields = ['name', 'is_default', 'obp_enabled', 'meal_plans_enabled', 'min_price']
    show_change_link = True


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'hotres_object_id', 'profiles_display', 'is_active', 'sort_order']
    list_filter = ['is_active']
    search_fields = ['name', 'code']
    prepopulated_fields = {'code': ('name',)}
    ordering = ['sort_order', 'name']

    fieldsets = (
        (None, {
            'fields': ('name', 'code', 'is_active', 'sort_order')
        }),
        ('Hotres', {
            'fields': ('hotres_object_id',),
        }),
        ('Display Settings', {
            'fields': ('currency_symbol', 'notes'),
        }),
    )

    inlines = [ProfileInline]

    def profiles_display(self, obj):
        """Display count of profiles."""
        count = obj.profiles.count()
        if count > 0:
            url = reverse('admin:channel_rates_profile_changelist') + f'?hotel__id__exact={obj.id}'
            return format_html('<a href="{}">{} profiles</a>', url, count)
        return '0'
    profiles_display.short_description = 'Profiles'


class RoomTypeInline(admin.TabularInline):
    """Inline for room types within a profile."""
    model = RoomType
    extra = 0
    fields = ['name', 'max_occupancy', 'base_price_peak', 'units', 'hotres_type_id', 'sort_order']
    ordering = ['sort_order', 'name']
    show_change_link = True


class SeasonInline(admin.TabularInline):
    """Inline for seasons within a profile."""
    model = Season
    extra = 0
    fields = ['name', 'start_date', 'end_date', 'multiplier', 'min_nights']
    ordering = ['start_date']
    show_change_link = True


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['name', 'hotel', 'is_default', 'obp_enabled', 'meal_plans_enabled', 'min_price']
    list_filter = ['hotel', 'is_default']
    search_fields = ['name', 'hotel__name']
    ordering = ['hotel', '-is_default', 'name']

    fieldsets = (
        (None, {
            'fields': ('hotel', 'name', 'is_default')
        }),
        ('OBP', {
            'fields': ('obp_enabled', 'default_obp_per_person'),
            'description': 'Deduction per guest below maximum occupancy'
        }),
        ('Meal Plans', {
            'fields': ('meal_plans_enabled', 'default_breakfast_price', 'default_full_board_price'),
        }),
        ('Limits', {
            'fields': ('min_price',),
        }),
    )

    inlines = [SeasonInline, RoomTypeInline]


# =============================================================================
# SEASON ADMIN
# =============================================================================

class ChannelSeasonDiscountInline(admin.TabularInline):
    """Inline for the channel discounts of one season."""
    model = ChannelSeasonDiscount
    extra = 0
    fields = [
        'channel',
        'mobile_percent', 'mobile_enabled',
        'genius_percent', 'genius_enabled',
        'seasonal_percent', 'seasonal_enabled',
        'first_minute_percent', 'first_minute_enabled',
        'last_minute_percent', 'last_minute_enabled',
        'is_customized',
    ]
    readonly_fields = ['channel', 'is_customized']
    verbose_name_plural = "Channel Discounts for This Season"

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Season)
class SeasonAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'profile', 'start_date', 'end_date',
        'multiplier', 'min_nights', 'obp_enabled', 'customized_discounts_count'
    ]
    list_editable = ['multiplier', 'min_nights']
    list_filter = ['profile', 'profile__hotel']
    search_fields = ['name', 'profile__name']
    ordering = ['profile', 'start_date']

    fieldsets = (
        (None, {
            'fields': ('profile', 'name')
        }),
        ('Date Range', {
            'fields': ('start_date', 'end_date')
        }),
        ('Pricing', {
            'fields': ('multiplier', 'min_nights', 'obp_enabled', 'obp_per_person'),
        }),
    )

    inlines = [ChannelSeasonDiscountInline]

    def customized_discounts_count(self, obj):
        total = obj.channel_discounts.count()
        customized = obj.channel_discounts.filter(is_customized=True).count()
        if customized > 0:
            return f"✓ {customized}/{total} customized"
        return f"{total} channels (all default)"
    customized_discounts_count.short_description = "Channel Discounts"


# =============================================================================
# ROOM TYPE ADMIN
# =============================================================================

class RoomTypeSeasonConfigInline(admin.TabularInline):
    model = RoomTypeSeasonConfig
    extra = 0
    fields = [
        'season', 'base_price', 'obp_active', 'obp_per_person', 'min_obp_occupancy',
        'meal_option', 'breakfast_price', 'full_board_price', 'comment', 'occupancy_rate',
    ]
    readonly_fields = ['season']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(RoomType)
class RoomTypeAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'profile', 'max_occupancy', 'units',
        'base_price_peak', 'hotres_type_id', 'sort_order'
    ]
    list_editable = ['max_occupancy', 'units', 'base_price_peak', 'sort_order']
    list_filter = ['profile', 'profile__hotel']
    search_fields = ['name', 'profile__name']
    ordering = ['profile', 'sort_order', 'name']

    fieldsets = (
        (None, {
            'fields': ('profile', 'name', 'units', 'sort_order', 'hotres_type_id')
        }),
        ('Pricing', {
            'fields': ('max_occupancy', 'base_price_peak'),
        }),
        ('OBP', {
            'fields': ('obp_per_person', 'min_obp_occupancy'),
            'description': 'Blank values fall back to the season, then the profile default'
        }),
        ('Meal Plans', {
            'fields': ('breakfast_price', 'full_board_price'),
        }),
    )

    inlines = [RoomTypeSeasonConfigInline]


# =============================================================================
# CHANNEL ADMIN
# =============================================================================

@admin.register(Channel)
class ChannelAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'code', 'profile', 'commission_percent',
        'total_discount_display', 'hotres_rate_id', 'is_active', 'sort_order'
    ]
    list_editable = ['commission_percent', 'is_active', 'sort_order']
    list_filter = ['profile', 'is_active']
    search_fields = ['name', 'code']
    ordering = ['profile', 'sort_order', 'name']

    fieldsets = (
        (None, {
            'fields': ('profile', 'code', 'name', 'color', 'is_active', 'sort_order')
        }),
        ('Commission', {
            'fields': ('commission_percent',),
            'description': 'Taken on the price left after discounts'
        }),
        ('Base Discounts', {
            'fields': DISCOUNT_FIELDSET_FIELDS + ('discount_labels',),
            'description': 'Copied to every season until a season is customized'
        }),
        ('Hotres', {
            'fields': ('hotres_rate_id',),
        }),
    )

    def total_discount_display(self, obj):
        return f"{obj.total_discount_percent()}%"
    total_discount_display.short_description = 'Discounts'


@admin.register(ChannelSeasonDiscount)
class ChannelSeasonDiscountAdmin(admin.ModelAdmin):
    list_display = ['channel', 'season', 'total_discount_display', 'is_customized']
    list_filter = ['is_customized', 'channel', 'season__profile']
    search_fields = ['channel__name', 'season__name']
    ordering = ['season__profile', 'season__start_date', 'channel__sort_order']

    fieldsets = (
        (None, {
            'fields': ('channel', 'season', 'is_customized', 'notes')
        }),
        ('Discounts', {
            'fields': DISCOUNT_FIELDSET_FIELDS,
        }),
    )

    actions = ['reset_to_base']

    def total_discount_display(self, obj):
        return f"{obj.total_discount_percent()}%"
    total_discount_display.short_description = 'Discounts'

    def reset_to_base(self, request, queryset):
        """Reset selected entries to the channel's base discounts."""
        count = 0
        for obj in queryset:
            obj.reset_to_base()
            count += 1
        self.message_user(request, f"Reset {count} entries to base discounts.")
    reset_to_base.short_description = "Reset to base discounts"
