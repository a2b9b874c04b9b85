"""
Unit tests for grid generation, occupancy ladder and configuration checks.
"""

import json
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from channel_rates.constants import MAX_OCCUPANCY
from channel_rates.domain import Channel, DiscountProfile
from channel_rates.exceptions import InvalidConfigurationError
from channel_rates.services.grid_service import (
    DIRECT_PRICE_ERROR_KEY,
    calculate_occupancy_ladder,
    generate_pricing_grid,
    resolve_row_occupancy,
    validate_configuration,
)


@pytest.fixture
def greedy():
    return Channel(
        id='greedy', name='Greedy', commission_pct=Decimal('60'),
        discounts=DiscountProfile.from_percents(mobile=50),
    )


class TestResolveRowOccupancy:

    def test_max_uses_room_capacity(self, cottage):
        assert resolve_row_occupancy(cottage, MAX_OCCUPANCY) == 6

    def test_fixed_is_capped(self, room):
        assert resolve_row_occupancy(room, 5) == 2
        assert resolve_row_occupancy(room, 1) == 1

    def test_override_wins_and_is_clamped(self, cottage):
        assert resolve_row_occupancy(cottage, 2, override=4) == 4
        assert resolve_row_occupancy(cottage, MAX_OCCUPANCY, override=0) == 1
        assert resolve_row_occupancy(cottage, MAX_OCCUPANCY, override=10) == 6


class TestGeneratePricingGrid:

    def test_room_major_order(self, room, cottage, peak, low, booking, settings_default):
        grid = generate_pricing_grid([room, cottage], [peak, low], [booking], settings_default)
        assert [(r.room_id, r.season_id) for r in grid] == [
            ('r1', 's1'), ('r1', 's2'), ('r2', 's1'), ('r2', 's2'),
        ]

    def test_max_occupancy_rows(self, room, cottage, peak, booking, settings_default):
        grid = generate_pricing_grid([room, cottage], [peak], [booking], settings_default)
        assert [r.occupancy for r in grid] == [2, 6]
        assert grid[0].direct_price == 200
        assert grid[0].channel_calculations['booking'].list_price == 278

    def test_fixed_occupancy(self, room, cottage, peak, booking, settings_default):
        grid = generate_pricing_grid([room, cottage], [peak], [booking], settings_default, occupancy=4)
        assert [r.occupancy for r in grid] == [2, 4]

    def test_fixed_occupancy_must_be_positive(self, room, peak, booking, settings_default):
        with pytest.raises(ValueError):
            generate_pricing_grid([room], [peak], [booking], settings_default, occupancy=0)

    def test_row_override(self, room, peak, low, booking, settings_default):
        grid = generate_pricing_grid(
            [room], [peak, low], [booking], settings_default,
            overrides={('r1', 's1'): 1},
        )
        assert grid[0].occupancy == 1
        assert grid[0].direct_price == 170
        assert grid[1].occupancy == 2

    def test_idempotent(self, room, cottage, peak, low, booking, settings_default):
        args = ([room, cottage], [peak, low], [booking], settings_default)
        first = json.dumps([r.to_dict() for r in generate_pricing_grid(*args)])
        second = json.dumps([r.to_dict() for r in generate_pricing_grid(*args)])
        assert first == second

    def test_bad_season_isolated(self, room, peak, booking, settings_default):
        broken = replace(peak, id='s9', multiplier=Decimal('0'))
        grid = generate_pricing_grid([room], [peak, broken], [booking], settings_default)

        assert grid[0].is_valid
        assert grid[1].direct_price is None
        assert DIRECT_PRICE_ERROR_KEY in grid[1].errors
        assert grid[1].channel_calculations == {}

    def test_bad_channel_isolated(self, room, peak, booking, greedy, settings_default):
        grid = generate_pricing_grid([room], [peak], [booking, greedy], settings_default)
        row = grid[0]
        assert row.direct_price == 200
        assert 'booking' in row.channel_calculations
        assert 'greedy' not in row.channel_calculations
        assert 'greedy' in row.errors

    def test_room_without_capacity_gets_error_row(self, room, peak, booking, settings_default):
        grid = generate_pricing_grid([replace(room, max_occupancy=0)], [peak], [booking], settings_default)
        assert len(grid) == 1
        assert DIRECT_PRICE_ERROR_KEY in grid[0].errors

    def test_room_without_occupancy_does_not_abort_grid(self, room, cottage, peak, booking, settings_default):
        grid = generate_pricing_grid(
            [replace(room, max_occupancy=None), cottage], [peak], [booking], settings_default
        )
        assert DIRECT_PRICE_ERROR_KEY in grid[0].errors
        assert grid[1].direct_price == 600

    def test_comment_and_occupancy_rate_carried(self, room, peak, booking, settings_default):
        room = replace(room, season_comments={'s1': 'Festival week'},
                       season_occupancy={'s1': Decimal('80')})
        row = generate_pricing_grid([room], [peak], [booking], settings_default)[0]
        assert row.comment == 'Festival week'
        assert row.to_dict()['occupancy_rate'] == 80.0

    def test_empty_inputs(self, settings_default):
        assert generate_pricing_grid([], [], [], settings_default) == []


class TestOccupancyLadder:

    def test_one_row_per_occupancy(self, cottage, peak, booking, settings_default):
        ladder = calculate_occupancy_ladder(cottage, peak, [booking], settings_default)
        assert [r.occupancy for r in ladder] == [1, 2, 3, 4, 5, 6]
        assert [r.direct_price for r in ladder] == [510, 510, 510, 540, 570, 600]
        assert all(r.max_occupancy == 6 for r in ladder)

    def test_list_prices_per_step(self, room, peak, booking, settings_default):
        ladder = calculate_occupancy_ladder(room, peak, [booking], settings_default)
        assert [r.channel_calculations['booking'].list_price for r in ladder] == [237, 278]

    def test_invalid_season_raises(self, room, peak, booking, settings_default):
        with pytest.raises(InvalidConfigurationError):
            calculate_occupancy_ladder(room, replace(peak, multiplier=Decimal('-1')), [booking], settings_default)


class TestValidateConfiguration:

    def test_clean_configuration(self, room, peak, low, booking):
        assert validate_configuration([room], [peak, low], [booking]) == []

    def test_reports_every_problem(self, room, peak, booking, greedy):
        inverted = replace(peak, id='s3', start_date=date(2025, 9, 1), end_date=date(2025, 8, 1))
        no_multiplier = replace(peak, id='s4', multiplier=Decimal('0'))
        duplicate = replace(peak, name='Peak again')

        issues = validate_configuration(
            [room, replace(room, id='r0', max_occupancy=0)],
            [peak, duplicate, inverted, no_multiplier],
            [booking, greedy],
        )

        found = {(i['type'], i['object_type'], i['object_id']) for i in issues}
        assert ('invalid_configuration', 'room', 'r0') in found
        assert ('duplicate_id', 'season', 's1') in found
        assert ('invalid_date_range', 'season', 's3') in found
        assert ('invalid_configuration', 'season', 's4') in found
        assert ('invalid_configuration', 'channel', 'greedy') in found
        assert not any(i['object_id'] == 'booking' for i in issues)

    def test_channel_issue_reported_once(self, peak, low, greedy):
        mirrored = replace(greedy, season_discounts={'s1': greedy.discounts, 's2': greedy.discounts})
        for channel in (greedy, mirrored):
            issues = validate_configuration([], [peak, low], [channel])
            assert len(issues) == 1
            assert issues[0]['object_id'] == 'greedy'

    def test_distinct_season_stacks_reported_separately(self, peak, low, greedy):
        worse = replace(greedy, season_discounts={'s2': DiscountProfile.from_percents(mobile=60)})
        issues = validate_configuration([], [peak, low], [worse])
        assert len(issues) == 2

    def test_reserved_channel_id(self, peak, booking):
        clash = replace(booking, id=DIRECT_PRICE_ERROR_KEY)
        issues = validate_configuration([], [peak], [clash])
        assert [(i['type'], i['object_id']) for i in issues] == [('reserved_id', DIRECT_PRICE_ERROR_KEY)]
