"""
Export Services
===============

Tabular exports of a computed pricing grid:
- CSV (pandas) with one line per room/season and list/net/commission per channel
- Printable PDF price list (reportlab) for one season
"""

from io import BytesIO
from xml.sax.saxutils import escape

import pandas as pd

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from channel_rates.services.analytics_service import grid_to_dataframe


def export_grid_csv(grid, channels):
    """
    Render a pricing grid as CSV text.

    Column headers use channel display names, e.g. 'Booking.com list'.
    """
    df = grid_to_dataframe(grid, channels)

    labels = {
        'room_id': 'Room ID',
        'season_id': 'Season ID',
        'room': 'Room',
        'season': 'Season',
        'occupancy': 'Occupancy',
        'max_occupancy': 'Max Occupancy',
        'min_nights': 'Min Nights',
        'base_price': 'Base Price',
        'direct_price': 'Direct Price',
    }
    for channel in channels:
        labels[f'{channel.id}_list'] = f'{channel.name} list'
        labels[f'{channel.id}_net'] = f'{channel.name} net'
        labels[f'{channel.id}_commission'] = f'{channel.name} commission'

    # Integer columns that may hold gaps become nullable Int64 so they print as 170, not 170.0
    for column in ['direct_price'] + [f'{channel.id}_list' for channel in channels]:
        df[column] = pd.to_numeric(df[column], errors='coerce').astype('Int64')

    return df.rename(columns=labels).to_csv(index=False)


def _is_pif_channel(channel):
    """Pay-in-full tiers are shown for Booking.com only."""
    return 'booking' in channel.id.lower() or 'booking' in channel.name.lower()


def build_price_list_pdf(property_name, season, rows, channels, currency=''):
    """
    Printable one-season price list.

    Args:
        property_name: str, printed in the title
        season: Season
        rows: PricingRows for this season (one per room)
        channels: Channels to print, in column order
        currency: optional currency suffix for cells

    Returns:
        bytes: PDF document
    """
    buffer = BytesIO()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        rightMargin=15*mm,
        leftMargin=15*mm,
        topMargin=15*mm,
        bottomMargin=15*mm
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'PriceListTitle',
        parent=styles['Heading1'],
        fontSize=18,
        spaceAfter=6,
        textColor=colors.HexColor('#1e3a5f')
    )
    subtitle_style = ParagraphStyle(
        'PriceListSubtitle',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.grey,
        spaceAfter=12
    )

    def money(value):
        if value is None:
            return '-'
        return f"{value} {currency}".strip()

    story = [
        Paragraph(f"Price List - {escape(property_name)}", title_style),
        Paragraph(
            f"{escape(season.name)} | {season.start_date.strftime('%b %d, %Y')} - "
            f"{season.end_date.strftime('%b %d, %Y')} | min. {season.min_nights} nights",
            subtitle_style
        ),
        Spacer(1, 6*mm),
    ]

    header = ['Room', 'Guests', 'Direct']
    for channel in channels:
        header.append(channel.name)
        if _is_pif_channel(channel):
            header.extend([f"{channel.name}\nPIF 5%", f"{channel.name}\nPIF 10%"])

    data = [header]
    for row in rows:
        line = [row.room_name, str(row.occupancy), money(row.direct_price)]
        for channel in channels:
            calc = row.channel_calculations.get(channel.id)
            line.append(money(calc.list_price if calc else None))
            if _is_pif_channel(channel):
                line.append(money(calc.pif5 if calc else None))
                line.append(money(calc.pif10 if calc else None))
        data.append(line)

    table = Table(data, repeatRows=1)
    style = TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1e3a5f')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, 0), 8),
        ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
        ('LEADING', (0, 0), (-1, 0), 10),

        ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 1), (-1, -1), 9),
        ('ALIGN', (1, 1), (-1, -1), 'CENTER'),
        ('ALIGN', (0, 1), (0, -1), 'LEFT'),
        ('TOPPADDING', (0, 1), (-1, -1), 4),
        ('BOTTOMPADDING', (0, 1), (-1, -1), 4),

        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ])

    # Direct price column highlighted
    style.add('BACKGROUND', (2, 1), (2, -1), colors.HexColor('#e0e7ff'))
    table.setStyle(style)

    story.append(table)
    doc.build(story)

    return buffer.getvalue()
