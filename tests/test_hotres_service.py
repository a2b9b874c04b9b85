"""
Tests for the Hotres client, driven through httpx.MockTransport.
"""

import json
from dataclasses import replace
from datetime import date
from decimal import Decimal

import httpx
import pytest

from channel_rates.domain import Channel, Room
from channel_rates.exceptions import HotresError
from channel_rates.services.grid_service import calculate_occupancy_ladder
from channel_rates.services.hotres_service import (
    PushResult,
    build_price_entry,
    calculate_occupancy_percentage,
    max_occupancy_from_beds,
    summarize_push,
    to_iso_date,
)


class TestHelpers:

    def test_occupancy_percentage(self):
        days = [{'available': '0'}, {'available': '1'}, {'available': '0'}]
        assert calculate_occupancy_percentage(days) == 67

    def test_occupancy_percentage_rounds_half_up(self):
        days = [{'available': '0'}] + [{'available': '1'}] * 7
        assert calculate_occupancy_percentage(days) == 13

    def test_occupancy_percentage_empty(self):
        assert calculate_occupancy_percentage([]) == 0

    def test_max_occupancy_from_beds(self):
        assert max_occupancy_from_beds({'single': 1, 'double': 1, 'sofa': 0, 'sofa_single': 1}) == 4
        assert max_occupancy_from_beds({'double': '2', 'sofa': '1'}) == 6

    def test_max_occupancy_defaults_to_two(self):
        assert max_occupancy_from_beds({}) == 2
        assert max_occupancy_from_beds({'single': 'n/a'}) == 2

    def test_iso_dates(self):
        assert to_iso_date(date(2025, 7, 1)) == '2025-07-01'
        assert to_iso_date('2025-07-01') == '2025-07-01'

    def test_summarize_push(self):
        assert summarize_push([]) == (False, 'Nothing was sent')
        assert summarize_push([PushResult('booking', True, 'success')]) == (True, 'Updated 1 rate(s)')

        success, message = summarize_push([
            PushResult('booking', True, 'success'),
            PushResult('airbnb', False, 'HTTP 500'),
        ])
        assert success is False
        assert 'airbnb: HTTP 500' in message


class TestBuildPriceEntry:

    def test_caps_persons_at_eight(self, booking, peak, settings_default):
        big = Room(id='h', name='House', max_occupancy=10, base_price_peak=Decimal('1000'))
        ladder = calculate_occupancy_ladder(big, peak, [booking], settings_default)
        entry = build_price_entry('booking', peak.start_date, peak.end_date, 5, ladder)

        assert 'pers8' in entry
        assert 'pers9' not in entry
        assert entry['baseprice'] == ladder[-1].channel_calculations['booking'].list_price
        assert entry['min'] == 5
        assert entry['cta'] == 0 and entry['ctd'] == 0

    def test_missing_channel_price(self, room, peak, booking, settings_default):
        greedy = Channel(id='greedy', name='Greedy', commission_pct=Decimal('100'))
        ladder = calculate_occupancy_ladder(room, peak, [booking, greedy], settings_default)
        with pytest.raises(HotresError):
            build_price_entry('greedy', peak.start_date, peak.end_date, 5, ladder)


class TestReads:

    def test_fetch_occupancy(self, make_hotres_client):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[
                {'type_id': 45, 'dates': [
                    {'date': '2025-07-01', 'available': '0'},
                    {'date': '2025-07-02', 'available': '1'},
                ]},
            ])

        client = make_hotres_client(handler)
        assert client.fetch_occupancy('999', '45', '2025-07-01', date(2025, 7, 2)) == 50

        params = seen[0].url.params
        assert seen[0].url.path == '/api_availability'
        assert params['oid'] == '999'
        assert params['type_id'] == '45'
        assert params['from'] == '2025-07-01'
        assert params['till'] == '2025-07-02'
        assert params['user'] == 'api-user'

    def test_fetch_occupancy_unknown_type(self, make_hotres_client):
        client = make_hotres_client(lambda request: httpx.Response(200, json=[{'type_id': 1, 'dates': []}]))
        with pytest.raises(HotresError):
            client.fetch_occupancy('999', '45', '2025-07-01', '2025-07-02')

    def test_season_occupancy_map(self, make_hotres_client):
        client = make_hotres_client(lambda request: httpx.Response(200, json=[
            {'type_id': 45, 'dates': [{'available': '0'}]},
            {'type_id': 46, 'dates': [{'available': '1'}]},
        ]))
        assert client.fetch_season_occupancy_map('999', '2025-07-01', '2025-07-31') == {'45': 100, '46': 0}

    def test_http_error_raises(self, make_hotres_client):
        client = make_hotres_client(lambda request: httpx.Response(500, text='boom'))
        with pytest.raises(HotresError) as exc:
            client.fetch_season_occupancy_map('999', '2025-07-01', '2025-07-31')
        assert exc.value.status_code == 500

    def test_invalid_json_raises(self, make_hotres_client):
        client = make_hotres_client(lambda request: httpx.Response(200, text='<html>'))
        with pytest.raises(HotresError):
            client.fetch_season_occupancy_map('999', '2025-07-01', '2025-07-31')

    def test_missing_object_id(self, make_hotres_client):
        client = make_hotres_client(lambda request: httpx.Response(200, json=[]))
        with pytest.raises(HotresError):
            client.fetch_rooms('')

    def test_fetch_rooms(self, make_hotres_client):
        client = make_hotres_client(lambda request: httpx.Response(200, json=[
            {'type_id': 45, 'code': 'Studio', 'single': 1, 'double': 1},
            {'type_id': 46, 'code': '', 'double': 0},
        ]))
        rooms = client.fetch_rooms('999')

        assert [r.id for r in rooms] == ['hotres-45', 'hotres-46']
        assert rooms[0].name == 'Studio'
        assert rooms[0].max_occupancy == 3
        assert rooms[0].hotres_type_id == '45'
        assert rooms[1].name == 'Room 46'
        assert rooms[1].max_occupancy == 2


class TestPushLadder:

    @pytest.fixture
    def channels(self, booking):
        airbnb = Channel(id='airbnb', name='Airbnb', commission_pct=Decimal('16'))
        return [booking, airbnb]

    @pytest.fixture
    def ladder(self, room, peak, channels, settings_default):
        return calculate_occupancy_ladder(room, peak, channels, settings_default)

    def test_one_request_per_rated_channel(self, make_hotres_client, room, peak, channels, ladder):
        sent = []

        def handler(request):
            sent.append(request)
            return httpx.Response(200, json={'result': 'success'})

        client = make_hotres_client(handler)
        results = client.push_ladder('999', room, peak.start_date, peak.end_date, 5, ladder, channels)

        assert results == [PushResult('booking', True, 'success')]
        assert len(sent) == 1
        assert sent[0].method == 'POST'
        assert sent[0].url.path == '/api_updateprices'

        payload = json.loads(sent[0].content)
        assert payload == [{
            'type_id': 45,
            'rate_id': 7,
            'mode': 'delta',
            'prices': [{
                'from': '2025-07-03',
                'till': '2025-08-17',
                'baseprice': 278,
                'min': 5,
                'cta': 0,
                'ctd': 0,
                'pers1': 237,
                'pers2': 278,
            }],
        }]

    def test_rejected_update_reported(self, make_hotres_client, room, peak, channels, ladder):
        client = make_hotres_client(
            lambda request: httpx.Response(200, json={'result': 'error', 'message': 'bad rate'})
        )
        results = client.push_ladder('999', room, peak.start_date, peak.end_date, 5, ladder, channels)
        assert results[0].success is False
        assert 'bad rate' in results[0].message

    def test_http_failure_not_retried(self, make_hotres_client, room, peak, channels, ladder):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, text='maintenance')

        client = make_hotres_client(handler)
        results = client.push_ladder('999', room, peak.start_date, peak.end_date, 5, ladder, channels)

        assert len(calls) == 1
        assert results[0].success is False
        assert 'HTTP 503' in results[0].message

    def test_room_without_type_id(self, make_hotres_client, room, peak, channels, ladder):
        client = make_hotres_client(lambda request: httpx.Response(200, json={'result': 'success'}))
        no_type = Room(id='x', name='Unmapped', max_occupancy=2, base_price_peak=Decimal('200'))
        with pytest.raises(HotresError):
            client.push_ladder('999', no_type, peak.start_date, peak.end_date, 5, ladder, channels)

    def test_no_rated_channels(self, make_hotres_client, room, peak, ladder):
        client = make_hotres_client(lambda request: httpx.Response(200, json={'result': 'success'}))
        plain = Channel(id='airbnb', name='Airbnb')
        with pytest.raises(HotresError):
            client.push_ladder('999', room, peak.start_date, peak.end_date, 5, ladder, [plain])

    def test_inverted_dates(self, make_hotres_client, room, peak, channels, ladder):
        client = make_hotres_client(lambda request: httpx.Response(200, json={'result': 'success'}))
        with pytest.raises(ValueError):
            client.push_ladder('999', room, '2025-08-01', '2025-07-01', 5, ladder, channels)

    def test_push_profile_prices(self, make_hotres_client, room, cottage, peak, low, channels, settings_default):
        sent = []

        def handler(request):
            sent.append(json.loads(request.content))
            return httpx.Response(200, json={'result': 'success'})

        client = make_hotres_client(handler)
        results = client.push_profile_prices('999', [room, cottage], [peak, low], channels, settings_default)

        # cottage has no Hotres type id
        assert len(results) == 2
        assert all(r.success for r in results)
        assert [p[0]['prices'][0]['from'] for p in sent] == ['2025-07-03', '2025-09-01']
        assert sent[1][0]['prices'][0]['min'] == 2

    def test_unpriceable_season_does_not_hide_sent_updates(self, make_hotres_client, room, peak, low,
                                                            channels, settings_default):
        sent = []

        def handler(request):
            sent.append(json.loads(request.content))
            return httpx.Response(200, json={'result': 'success'})

        client = make_hotres_client(handler)
        free = replace(low, multiplier=Decimal('0'))
        results = client.push_profile_prices('999', [room], [peak, free], channels, settings_default)

        assert len(sent) == 1
        assert results[0] == PushResult('booking', True, 'success')
        assert results[1].channel_id == 'booking'
        assert results[1].success is False
        assert 'multiplier' in results[1].message
        assert summarize_push(results)[0] is False

    def test_failed_pair_does_not_stop_later_pairs(self, make_hotres_client, room, peak, low,
                                                   channels, settings_default):
        inverted = replace(peak, start_date=low.end_date)
        client = make_hotres_client(lambda request: httpx.Response(200, json={'result': 'success'}))
        results = client.push_profile_prices('999', [room], [inverted, low], channels, settings_default)

        assert [r.success for r in results] == [False, True]
