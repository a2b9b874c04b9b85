"""
Services package.

Re-exports the calculation and integration entry points:
    from channel_rates.services import generate_pricing_grid, HotresClient
"""

from .pricing_service import (
    calculate_channel_price,
    calculate_direct_price,
    calculate_required_base_price,
)
from .grid_service import (
    calculate_occupancy_ladder,
    generate_pricing_grid,
    validate_configuration,
)
from .analytics_service import build_summary, grid_to_dataframe
from .export_service import build_price_list_pdf, export_grid_csv
from .hotres_service import HotresClient, PushResult, summarize_push

__all__ = [
    # Pricing
    'calculate_direct_price', 'calculate_channel_price', 'calculate_required_base_price',
    # Grid
    'generate_pricing_grid', 'calculate_occupancy_ladder', 'validate_configuration',
    # Analytics & exports
    'build_summary', 'grid_to_dataframe', 'export_grid_csv', 'build_price_list_pdf',
    # Hotres
    'HotresClient', 'PushResult', 'summarize_push',
]
