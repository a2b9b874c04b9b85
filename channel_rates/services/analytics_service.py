"""
Summary Analytics Service

Aggregates a pricing grid into dashboard figures:
- KPIs (rooms, capacity, average direct price, potential revenue per night)
- Direct vs reference-OTA price trend per season
- Revenue share per room type
- Channel profitability (average net vs average commission)

All figures are derived from the grid on every call; nothing is stored.
"""

import logging
from decimal import Decimal

import pandas as pd

from channel_rates.services.pricing_service import round_half_up

logger = logging.getLogger(__name__)


def grid_to_dataframe(grid, channels):
    """
    Flatten pricing rows into a wide DataFrame.

    One row per PricingRow. For every channel three columns are added:
    '<channel_id>_list', '<channel_id>_net', '<channel_id>_commission'.
    Missing channel results (failed cells) are left as NaN.
    """
    records = []
    for row in grid:
        record = {
            'room_id': row.room_id,
            'season_id': row.season_id,
            'room': row.room_name,
            'season': row.season_name,
            'occupancy': row.occupancy,
            'max_occupancy': row.max_occupancy,
            'min_nights': row.min_nights,
            'base_price': float(row.base_price),
            'direct_price': row.direct_price,
        }
        for channel in channels:
            calc = row.channel_calculations.get(channel.id)
            record[f'{channel.id}_list'] = calc.list_price if calc else None
            record[f'{channel.id}_net'] = float(calc.estimated_net) if calc else None
            record[f'{channel.id}_commission'] = float(calc.commission) if calc else None
        records.append(record)

    columns = [
        'room_id', 'season_id', 'room', 'season', 'occupancy', 'max_occupancy',
        'min_nights', 'base_price', 'direct_price',
    ]
    for channel in channels:
        columns.extend([f'{channel.id}_list', f'{channel.id}_net', f'{channel.id}_commission'])

    return pd.DataFrame.from_records(records, columns=columns)


def find_reference_channel(channels):
    """Channel used for the OTA trend line: Booking.com if present, else the first."""
    for channel in channels:
        if 'booking' in channel.id.lower():
            return channel
    return channels[0] if channels else None


def _whole(value):
    """Round a pandas/float aggregate to a whole unit (half up)."""
    if value is None or pd.isna(value):
        return 0
    return round_half_up(Decimal(str(value)))


def _column_mean(frame, column):
    """Mean of a column, treating missing channel results as 0."""
    return pd.to_numeric(frame[column], errors='coerce').fillna(0).mean()


def build_summary(grid, rooms, seasons, channels):
    """
    Build dashboard summary figures from a pricing grid.

    Rows without a direct price (configuration errors) are left out of
    every aggregate.

    Returns:
        dict with kpis, price_trend, room_share, channel_profitability
    """
    df = grid_to_dataframe(grid, channels)
    df['direct_price'] = pd.to_numeric(df['direct_price'], errors='coerce')
    df = df[df['direct_price'].notna()]

    skipped = len(grid) - len(df)
    if skipped:
        logger.info("Summary skipped %s grid rows without a direct price", skipped)

    kpis = {
        'total_rooms': len(rooms),
        'total_capacity': sum(room.max_occupancy for room in rooms),
        'avg_direct_price': _whole(_column_mean(df, 'direct_price')) if len(df) else 0,
        'potential_per_night': 0,
        'active_channels': len(channels),
    }

    season_totals = df.groupby('season_id', sort=False)['direct_price'].sum()
    if seasons:
        potential = sum(float(season_totals.get(season.id, 0)) for season in seasons) / len(seasons)
        kpis['potential_per_night'] = _whole(potential)

    # Direct vs reference OTA per season
    reference = find_reference_channel(channels)
    price_trend = []
    for season in seasons:
        season_rows = df[df['season_id'] == season.id]
        ota = 0
        if reference is not None and len(season_rows):
            ota = _whole(_column_mean(season_rows, f'{reference.id}_list'))
        price_trend.append({
            'season_id': season.id,
            'name': season.name,
            'direct': _whole(_column_mean(season_rows, 'direct_price')) if len(season_rows) else 0,
            'ota': ota,
        })

    # Revenue share per room type
    room_totals = df.groupby('room_id', sort=False)['direct_price'].sum()
    room_share = [
        {
            'room_id': room.id,
            'name': room.name,
            'value': int(room_totals.get(room.id, 0)),
        }
        for room in rooms
    ]
    room_share.sort(key=lambda item: item['value'], reverse=True)

    # Average net vs commission per channel
    channel_profitability = []
    for channel in channels:
        if len(df):
            net = _whole(_column_mean(df, f'{channel.id}_net'))
            commission = _whole(_column_mean(df, f'{channel.id}_commission'))
        else:
            net = commission = 0
        channel_profitability.append({
            'channel_id': channel.id,
            'name': channel.name,
            'net': net,
            'commission': commission,
        })

    return {
        'kpis': kpis,
        'price_trend': price_trend,
        'room_share': room_share,
        'channel_profitability': channel_profitability,
        'reference_channel': reference.id if reference else None,
    }
