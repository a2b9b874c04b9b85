"""
Views package.

Re-exports all views so URL imports stay short:
    from channel_rates.views import PricingGridView, HotresPushView
"""

# Mixins
from .mixins import ProfileMixin

# Pricing views
from .pricing import (
    PricingGridView,
    OccupancyLadderView,
    RequiredBasePriceView,
    SummaryView,
    ValidationView,
    GridCSVView,
    PriceListPDFView,
    health,
)

# Hotres views
from .hotres import (
    HotresPushView,
    HotresOccupancySyncView,
)
