"""
Tests for the stored configuration: models, signals and conversion to
engine value objects.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from channel_rates.models import (
    Channel,
    ChannelSeasonDiscount,
    Profile,
    RoomType,
    RoomTypeSeasonConfig,
    Season,
)
from channel_rates.services import generate_pricing_grid

pytestmark = pytest.mark.django_db


class TestSignals:

    def test_rows_created_for_existing_pairs(self, profile):
        season = profile.seasons.get()
        channel = profile.channels.get()
        room = profile.room_types.get()

        discount = ChannelSeasonDiscount.objects.get(channel=channel, season=season)
        assert discount.mobile_percent == Decimal('10.00')
        assert discount.is_customized is False
        assert RoomTypeSeasonConfig.objects.filter(room_type=room, season=season).exists()

    def test_new_season_gets_rows(self, profile):
        season = Season.objects.create(
            profile=profile, name='Low',
            start_date=date(2025, 9, 1), end_date=date(2025, 9, 30),
        )
        assert ChannelSeasonDiscount.objects.filter(season=season).count() == 1
        assert RoomTypeSeasonConfig.objects.filter(season=season).count() == 1

    def test_base_change_syncs_untouched_rows(self, profile):
        channel = profile.channels.get()
        channel.mobile_percent = Decimal('15.00')
        channel.save()

        discount = ChannelSeasonDiscount.objects.get(channel=channel)
        assert discount.mobile_percent == Decimal('15.00')
        assert discount.is_customized is False

    def test_customized_rows_kept_until_reset(self, profile):
        channel = profile.channels.get()
        discount = ChannelSeasonDiscount.objects.get(channel=channel)
        discount.genius_percent = Decimal('5.00')
        discount.save()
        assert discount.is_customized is True

        channel.mobile_percent = Decimal('12.00')
        channel.save()

        discount = ChannelSeasonDiscount.objects.get(channel=channel)
        assert discount.mobile_percent == Decimal('10.00')
        assert discount.genius_percent == Decimal('5.00')

        discount.reset_to_base()
        discount = ChannelSeasonDiscount.objects.get(channel=channel)
        assert discount.mobile_percent == Decimal('12.00')
        assert discount.genius_percent == Decimal('0.00')
        assert discount.is_customized is False


class TestProfile:

    def test_single_default_per_property(self, profile):
        other = Profile.objects.create(hotel=profile.hotel, name='Draft', is_default=True)
        profile.refresh_from_db()
        assert profile.is_default is False
        assert profile.hotel.get_default_profile() == other

    def test_default_falls_back_to_oldest(self, profile):
        Profile.objects.filter(pk=profile.pk).update(is_default=False)
        Profile.objects.create(hotel=profile.hotel, name='Later')
        assert profile.hotel.get_default_profile() == profile

    def test_to_settings(self, profile):
        settings = profile.to_settings()
        assert settings.obp_enabled is True
        assert settings.default_obp_per_person == Decimal('30.00')
        assert settings.min_price == Decimal('50.00')

    def test_build_pricing_inputs(self, profile):
        inputs = profile.build_pricing_inputs()
        season = profile.seasons.get()
        room = profile.room_types.get()

        assert [r.id for r in inputs['rooms']] == [str(room.pk)]
        assert [s.id for s in inputs['seasons']] == [str(season.pk)]
        assert [c.id for c in inputs['channels']] == ['booking']
        assert str(season.pk) in inputs['channels'][0].season_discounts
        assert inputs['channels'][0].hotres_rate_id == '7'
        assert inputs['rooms'][0].seasonal_obp_active == {str(season.pk): True}

    def test_inactive_channels_skipped(self, profile):
        Channel.objects.create(profile=profile, code='old', name='Old OTA', is_active=False)
        inputs = profile.build_pricing_inputs()
        assert [c.id for c in inputs['channels']] == ['booking']

    def test_grid_from_stored_profile(self, profile):
        row = generate_pricing_grid(**profile.build_pricing_inputs())[0]
        assert row.direct_price == 200
        assert row.channel_calculations['booking'].list_price == 278

    def test_room_season_overrides_reach_engine(self, profile):
        config = RoomTypeSeasonConfig.objects.get()
        config.base_price = Decimal('250.00')
        config.comment = 'Festival'
        config.save()

        row = generate_pricing_grid(**profile.build_pricing_inputs())[0]
        assert row.direct_price == 250
        assert row.comment == 'Festival'

    def test_customized_season_discount_reaches_engine(self, profile):
        discount = ChannelSeasonDiscount.objects.get()
        discount.mobile_enabled = False
        discount.save()

        row = generate_pricing_grid(**profile.build_pricing_inputs())[0]
        assert row.channel_calculations['booking'].list_price == 250


class TestValidation:

    def test_season_dates(self, profile):
        season = Season(
            profile=profile, name='Broken',
            start_date=date(2025, 9, 1), end_date=date(2025, 8, 1),
        )
        with pytest.raises(ValidationError):
            season.full_clean()

    def test_multiplier_must_be_positive(self, profile):
        season = Season(
            profile=profile, name='Free',
            start_date=date(2025, 9, 1), end_date=date(2025, 9, 2),
            multiplier=Decimal('0.00'),
        )
        with pytest.raises(ValidationError):
            season.full_clean()

    def test_channel_deductions_too_large(self, profile):
        channel = Channel(
            profile=profile, code='greedy', name='Greedy',
            commission_percent=Decimal('60.00'), mobile_percent=Decimal('50.00'),
        )
        with pytest.raises(ValidationError):
            channel.full_clean()

    def test_channel_unknown_label(self, profile):
        channel = Channel(profile=profile, code='x', name='X', discount_labels={'weekend': 'Weekend'})
        with pytest.raises(ValidationError):
            channel.full_clean()

    def test_channel_code_reserved(self, profile):
        channel = Channel(profile=profile, code='direct_price', name='Direct')
        with pytest.raises(ValidationError) as exc:
            channel.full_clean()
        assert 'code' in exc.value.message_dict

    def test_channel_labels_merged_with_defaults(self, profile):
        channel = profile.channels.get()
        channel.discount_labels = {'seasonal': 'Early Summer'}
        labels = channel.get_discount_labels()
        assert labels['seasonal'] == 'Early Summer'
        assert labels['mobile'] == 'Mobile'

    def test_season_discount_too_large(self, profile):
        discount = ChannelSeasonDiscount.objects.get()
        discount.mobile_percent = Decimal('50.00')
        discount.genius_percent = Decimal('30.00')
        with pytest.raises(ValidationError):
            discount.full_clean()

    def test_min_obp_above_capacity(self, profile):
        room = RoomType(profile=profile, name='Tiny', max_occupancy=2,
                        base_price_peak=Decimal('100.00'), min_obp_occupancy=3)
        with pytest.raises(ValidationError):
            room.full_clean()
