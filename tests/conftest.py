"""
Shared fixtures: engine value objects and a stored pricing profile.
"""

from datetime import date
from decimal import Decimal

import httpx
import pytest

from channel_rates.domain import Channel, DiscountProfile, GlobalSettings, Room, Season
from channel_rates.services.hotres_service import HotresClient


@pytest.fixture
def settings_default():
    return GlobalSettings()


@pytest.fixture
def room():
    """Double room: 200 at full occupancy, default OBP."""
    return Room(id='r1', name='Room', max_occupancy=2, base_price_peak=Decimal('200.00'),
                hotres_type_id='45')


@pytest.fixture
def cottage():
    return Room(id='r2', name='Cottage', max_occupancy=6, base_price_peak=Decimal('600.00'),
                min_obp_occupancy=3, obp_per_person=Decimal('30.00'))


@pytest.fixture
def peak():
    return Season(id='s1', name='Peak', start_date=date(2025, 7, 3), end_date=date(2025, 8, 17),
                  multiplier=Decimal('1.00'), min_nights=5)


@pytest.fixture
def low():
    return Season(id='s2', name='Low', start_date=date(2025, 9, 1), end_date=date(2025, 9, 30),
                  multiplier=Decimal('0.50'), min_nights=2)


@pytest.fixture
def booking():
    return Channel(
        id='booking',
        name='Booking.com',
        commission_pct=Decimal('20'),
        discounts=DiscountProfile.from_percents(mobile=10),
        hotres_rate_id='7',
    )


@pytest.fixture
def direct_listing():
    """Channel with no commission and no discounts."""
    return Channel(id='own', name='Own Website')


@pytest.fixture
def make_hotres_client():
    """Factory: HotresClient whose requests are answered by handler(request)."""
    def factory(handler):
        return HotresClient(
            'api-user', 'secret',
            base_url='https://hotres.test',
            transport=httpx.MockTransport(handler),
        )
    return factory


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
def profile(db):
    """
    Stored profile: one double room, one peak season, Booking.com
    (20% commission, 10% mobile) with a Hotres rate id.
    """
    from channel_rates.models import Channel as ChannelModel
    from channel_rates.models import Profile, Property, RoomType
    from channel_rates.models import Season as SeasonModel

    prop = Property.objects.create(name='Villa', code='villa', hotres_object_id='999')
    profile = Profile.objects.create(hotel=prop, name='Default', is_default=True)
    SeasonModel.objects.create(
        profile=profile, name='Peak',
        start_date=date(2025, 7, 3), end_date=date(2025, 8, 17),
        multiplier=Decimal('1.00'), min_nights=5,
    )
    RoomType.objects.create(
        profile=profile, name='Room', max_occupancy=2,
        base_price_peak=Decimal('200.00'), hotres_type_id='45',
    )
    ChannelModel.objects.create(
        profile=profile, code='booking', name='Booking.com',
        commission_percent=Decimal('20.00'), mobile_percent=Decimal('10.00'),
        hotres_rate_id='7',
    )
    return profile
