"""
Hotres API client.

Talks to the Hotres property-management panel:
- availability read (occupancy percentage per room type)
- room type import
- manual price push (one request per channel and date range)

Pushes are destructive on the remote side and are never retried;
every attempt is reported back as a PushResult.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import httpx
from dateutil.parser import isoparse

from channel_rates.constants import DIRECT_PRICE_ERROR_KEY, HOTRES_MAX_PERSONS
from channel_rates.domain import Room
from channel_rates.exceptions import HotresError, PricingError
from channel_rates.services.grid_service import calculate_occupancy_ladder
from channel_rates.services.pricing_service import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://panel.hotres.pl'
DEFAULT_TIMEOUT = 15.0

# Defaults for room types imported from Hotres
IMPORTED_ROOM_BASE_PRICE = Decimal('300.00')
IMPORTED_ROOM_OBP_PER_PERSON = Decimal('30.00')


@dataclass(frozen=True)
class PushResult:
    """Outcome of one price-update request."""
    channel_id: str
    success: bool
    message: str

    def to_dict(self):
        return {
            'channel_id': self.channel_id,
            'success': self.success,
            'message': self.message,
        }


# =============================================================================
# PAYLOAD HELPERS
# =============================================================================

def to_iso_date(value):
    """Accept a date or an ISO string, return 'YYYY-MM-DD'."""
    if isinstance(value, date):
        return value.isoformat()
    return isoparse(value).date().isoformat()


def calculate_occupancy_percentage(days):
    """
    Share of booked days in an availability listing.

    A day is booked when its 'available' flag is "0".

    Returns:
        int: 0-100, rounded half up; 0 for an empty listing
    """
    if not days:
        return 0
    booked = sum(1 for day in days if str(day.get('available')) == '0')
    return round_half_up(Decimal(booked) * 100 / len(days))


def _bed_count(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def max_occupancy_from_beds(item):
    """Guests a Hotres room type sleeps: singles 1, doubles 2, sofas 2, sofa singles 1."""
    total = (
        _bed_count(item.get('single'))
        + 2 * _bed_count(item.get('double'))
        + 2 * _bed_count(item.get('sofa'))
        + _bed_count(item.get('sofa_single'))
    )
    return total if total > 0 else 2


def build_price_entry(channel_id, start_date, end_date, min_nights, ladder):
    """
    Price block for one channel: pers1..persN from the ladder.

    Args:
        ladder: PricingRows for occupancies 1..max, in order

    Raises:
        HotresError: a ladder step has no price for this channel
    """
    entry = {
        'from': to_iso_date(start_date),
        'till': to_iso_date(end_date),
        'baseprice': None,
        'min': min_nights or 1,
        'cta': 0,
        'ctd': 0,
    }

    for row in ladder:
        calc = row.channel_calculations.get(channel_id)
        if calc is None:
            reason = row.errors.get(channel_id) or row.errors.get(DIRECT_PRICE_ERROR_KEY) or 'no price'
            raise HotresError(
                f"No {channel_id} price for {row.occupancy} guest(s): {reason}"
            )
        if row.occupancy <= HOTRES_MAX_PERSONS:
            entry[f'pers{row.occupancy}'] = calc.list_price
        if row.occupancy == row.max_occupancy:
            entry['baseprice'] = calc.list_price

    if entry['baseprice'] is None:
        raise HotresError(f"Ladder for {channel_id} does not reach max occupancy")

    return entry


def build_push_payload(room, channel, start_date, end_date, min_nights, ladder):
    return [{
        'type_id': int(room.hotres_type_id),
        'rate_id': int(channel.hotres_rate_id),
        'mode': 'delta',
        'prices': [build_price_entry(channel.id, start_date, end_date, min_nights, ladder)],
    }]


def summarize_push(results):
    """
    Collapse push attempts into one pass/fail and message.

    Returns:
        tuple: (success, message)
    """
    if not results:
        return False, 'Nothing was sent'
    failed = [r for r in results if not r.success]
    if not failed:
        return True, f"Updated {len(results)} rate(s)"
    details = '; '.join(f"{r.channel_id}: {r.message}" for r in failed)
    return False, f"{len(failed)} of {len(results)} update(s) failed - {details}"


# =============================================================================
# CLIENT
# =============================================================================

class HotresClient:
    """
    Synchronous Hotres API client.

    Usage:
        client = HotresClient.from_settings()
        pct = client.fetch_occupancy('123', '45', '2025-07-01', '2025-07-31')
    """

    def __init__(self, user, password, base_url=DEFAULT_BASE_URL,
                 timeout=DEFAULT_TIMEOUT, transport=None):
        """
        Args:
            user: Hotres API user
            password: Hotres API password
            base_url: panel URL
            timeout: seconds per request
            transport: optional httpx transport (tests use httpx.MockTransport)
        """
        self.user = user
        self.password = password
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, transport=None):
        from django.conf import settings

        return cls(
            user=settings.HOTRES_USER,
            password=settings.HOTRES_PASSWORD,
            base_url=settings.HOTRES_BASE_URL,
            timeout=settings.HOTRES_TIMEOUT,
            transport=transport,
        )

    def _request(self, method, endpoint, params, payload=None):
        """
        Send one request and return the decoded JSON body.

        Raises:
            HotresError: transport failure, non-2xx status or invalid JSON
        """
        query = {'user': self.user, 'password': self.password}
        query.update(params)

        logger.info("Hotres %s %s %s", method, endpoint,
                    {k: v for k, v in params.items()})

        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout,
                              transport=self.transport) as client:
                response = client.request(method, endpoint, params=query, json=payload)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            body = e.response.text[:200]
            logger.error("Hotres %s failed: %s %s", endpoint, e.response.status_code, body)
            raise HotresError(
                f"HTTP {e.response.status_code} {e.response.reason_phrase} - {body}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Hotres %s transport error: %s", endpoint, e)
            raise HotresError(f"Transport error: {e}") from e
        except ValueError as e:
            logger.error("Hotres %s returned invalid JSON: %s", endpoint, e)
            raise HotresError(f"Invalid JSON response: {e}") from e

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def fetch_availability(self, object_id, start_date, end_date, type_id=None):
        if not object_id:
            raise HotresError("Missing Hotres object id")

        params = {
            'oid': object_id,
            'from': to_iso_date(start_date),
            'till': to_iso_date(end_date),
        }
        if type_id:
            params['type_id'] = type_id

        data = self._request('GET', '/api_availability', params)
        if not isinstance(data, list):
            raise HotresError("Unexpected availability response (expected a list)")
        return data

    def fetch_occupancy(self, object_id, type_id, start_date, end_date):
        """
        Occupancy percentage of one room type over a date range.

        Returns:
            int: 0-100
        """
        if not type_id:
            raise HotresError("Missing Hotres room type id")

        data = self.fetch_availability(object_id, start_date, end_date, type_id=type_id)
        if not data:
            raise HotresError("Empty availability response")

        for item in data:
            if str(item.get('type_id')) == str(type_id):
                return calculate_occupancy_percentage(item.get('dates') or [])

        raise HotresError(f"No availability data for room type {type_id}")

    def fetch_season_occupancy_map(self, object_id, start_date, end_date):
        """
        Occupancy percentage of every room type over a date range.

        Returns:
            dict: {type_id (str): percentage}
        """
        data = self.fetch_availability(object_id, start_date, end_date)
        return {
            str(item['type_id']): calculate_occupancy_percentage(item.get('dates') or [])
            for item in data
            if item.get('type_id')
        }

    def fetch_rooms(self, object_id):
        """
        Room types configured in Hotres, as engine Rooms with starter prices.
        """
        if not object_id:
            raise HotresError("Missing Hotres object id")

        data = self._request('GET', '/api_rooms', {'oid': object_id})
        if not isinstance(data, list):
            raise HotresError("Unexpected rooms response (expected a list)")

        rooms = []
        for index, item in enumerate(data):
            type_id = str(item.get('type_id', ''))
            rooms.append(Room(
                id=f'hotres-{type_id or index}',
                name=item.get('code') or f'Room {type_id}',
                max_occupancy=max_occupancy_from_beds(item),
                base_price_peak=IMPORTED_ROOM_BASE_PRICE,
                hotres_type_id=type_id,
                min_obp_occupancy=1,
                obp_per_person=IMPORTED_ROOM_OBP_PER_PERSON,
                sort_order=index,
            ))
        return rooms

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def push_ladder(self, object_id, room, start_date, end_date, min_nights, ladder, channels):
        """
        Push one room's occupancy ladder for a date range, one request per channel.

        Channels without a Hotres rate id are skipped. Failures are
        reported per attempt and never retried.

        Args:
            object_id: Hotres object (property) id
            room: Room with hotres_type_id
            start_date, end_date: inclusive range (date or ISO string)
            min_nights: minimum stay
            ladder: PricingRows for occupancies 1..max (calculate_occupancy_ladder)
            channels: Channels to push

        Returns:
            list of PushResult
        """
        if not object_id:
            raise HotresError("Missing Hotres object id")
        if not room.hotres_type_id:
            raise HotresError(f"Room '{room.name}' has no Hotres type id")
        if to_iso_date(start_date) > to_iso_date(end_date):
            raise ValueError(f"Start date {start_date} is after end date {end_date}")

        targets = [c for c in channels if c.hotres_rate_id]
        if not targets:
            raise HotresError("No channel has a Hotres rate id")

        results = []
        for channel in targets:
            try:
                payload = build_push_payload(room, channel, start_date, end_date, min_nights, ladder)
                response = self._request('POST', '/api_updateprices', {'oid': object_id}, payload)
            except HotresError as e:
                results.append(PushResult(channel.id, False, e.message))
                continue

            if isinstance(response, dict) and response.get('result') == 'success':
                logger.info("Hotres prices updated: room=%s channel=%s %s..%s",
                            room.id, channel.id, start_date, end_date)
                results.append(PushResult(channel.id, True, 'success'))
            else:
                logger.error("Hotres rejected update for channel=%s: %s", channel.id, response)
                results.append(PushResult(channel.id, False, f"Hotres API error: {response}"))

        return results

    def push_profile_prices(self, object_id, rooms, seasons, channels, settings):
        """
        Push every room × season ladder of a profile.

        Rooms without a Hotres type id are skipped. A room/season that
        cannot be priced or pushed gets a failed result for every rated
        channel; the remaining pairs are still sent.

        Returns:
            list of PushResult (all attempts, in room/season order)
        """
        targets = [c for c in channels if c.hotres_rate_id]
        results = []
        for room in rooms:
            if not room.hotres_type_id:
                logger.info("Skipping room %s without Hotres type id", room.id)
                continue
            for season in seasons:
                try:
                    ladder = calculate_occupancy_ladder(room, season, channels, settings)
                    results.extend(self.push_ladder(
                        object_id, room, season.start_date, season.end_date,
                        season.min_nights, ladder, channels,
                    ))
                except (PricingError, HotresError, ValueError) as e:
                    logger.error("Hotres push skipped room=%s season=%s: %s",
                                 room.id, season.id, e)
                    results.extend(
                        PushResult(channel.id, False, f"{room.name} / {season.name}: {e}")
                        for channel in targets
                    )
        return results
