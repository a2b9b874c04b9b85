"""
Tests for grid flattening and dashboard summary figures.
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from channel_rates.services.analytics_service import (
    build_summary,
    find_reference_channel,
    grid_to_dataframe,
)
from channel_rates.services.grid_service import generate_pricing_grid


@pytest.fixture
def grid(room, peak, low, booking, settings_default):
    return generate_pricing_grid([room], [peak, low], [booking], settings_default)


class TestGridToDataframe:

    def test_one_row_per_cell(self, grid, booking):
        df = grid_to_dataframe(grid, [booking])
        assert len(df) == 2
        assert list(df['direct_price']) == [200, 100]
        assert list(df['booking_list']) == [278, 139]

    def test_channel_columns(self, grid, booking):
        df = grid_to_dataframe(grid, [booking])
        for column in ('booking_list', 'booking_net', 'booking_commission'):
            assert column in df.columns

    def test_empty_grid_keeps_columns(self, booking):
        df = grid_to_dataframe([], [booking])
        assert df.empty
        assert 'booking_list' in df.columns


class TestBuildSummary:

    def test_kpis(self, grid, room, peak, low, booking):
        summary = build_summary(grid, [room], [peak, low], [booking])
        assert summary['kpis'] == {
            'total_rooms': 1,
            'total_capacity': 2,
            'avg_direct_price': 150,
            'potential_per_night': 150,
            'active_channels': 1,
        }

    def test_price_trend(self, grid, room, peak, low, booking):
        summary = build_summary(grid, [room], [peak, low], [booking])
        assert summary['price_trend'] == [
            {'season_id': 's1', 'name': 'Peak', 'direct': 200, 'ota': 278},
            {'season_id': 's2', 'name': 'Low', 'direct': 100, 'ota': 139},
        ]
        assert summary['reference_channel'] == 'booking'

    def test_room_share_sorted(self, room, cottage, peak, booking, settings_default):
        grid = generate_pricing_grid([room, cottage], [peak], [booking], settings_default)
        summary = build_summary(grid, [room, cottage], [peak], [booking])
        assert [item['room_id'] for item in summary['room_share']] == ['r2', 'r1']
        assert summary['room_share'][0]['value'] == 600

    def test_channel_profitability(self, grid, room, peak, low, booking):
        summary = build_summary(grid, [room], [peak, low], [booking])
        assert summary['channel_profitability'] == [
            {'channel_id': 'booking', 'name': 'Booking.com', 'net': 150, 'commission': 38},
        ]

    def test_error_rows_left_out(self, room, peak, low, booking, settings_default):
        broken = replace(low, id='s9', multiplier=Decimal('0'))
        seasons = [peak, low, broken]
        grid = generate_pricing_grid([room], seasons, [booking], settings_default)
        summary = build_summary(grid, [room], seasons, [booking])
        assert summary['kpis']['avg_direct_price'] == 150
        assert summary['price_trend'][2]['direct'] == 0

    def test_no_channels(self, room, peak, settings_default):
        grid = generate_pricing_grid([room], [peak], [], settings_default)
        summary = build_summary(grid, [room], [peak], [])
        assert summary['reference_channel'] is None
        assert summary['price_trend'][0]['ota'] == 0
        assert summary['channel_profitability'] == []


class TestReferenceChannel:

    def test_prefers_booking(self, booking, direct_listing):
        assert find_reference_channel([direct_listing, booking]) is booking

    def test_falls_back_to_first(self, direct_listing):
        assert find_reference_channel([direct_listing]) is direct_listing

    def test_none_without_channels(self):
        assert find_reference_channel([]) is None
