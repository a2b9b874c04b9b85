"""Pricing URL patterns: grid, ladder, calculator, summary, exports."""

from django.urls import path
from channel_rates.views import (
    PricingGridView,
    OccupancyLadderView,
    RequiredBasePriceView,
    SummaryView,
    ValidationView,
    GridCSVView,
    PriceListPDFView,
    health,
)

urlpatterns = [
    path('health/', health, name='health'),

    # JSON endpoints
    path('p/<slug:prop_code>/api/grid/',
         PricingGridView.as_view(), name='grid'),
    path('p/<slug:prop_code>/api/ladder/',
         OccupancyLadderView.as_view(), name='ladder'),
    path('p/<slug:prop_code>/api/calculator/',
         RequiredBasePriceView.as_view(), name='calculator'),
    path('p/<slug:prop_code>/api/summary/',
         SummaryView.as_view(), name='summary'),
    path('p/<slug:prop_code>/api/validation/',
         ValidationView.as_view(), name='validation'),

    # Exports
    path('p/<slug:prop_code>/export/grid.csv',
         GridCSVView.as_view(), name='grid_csv'),
    path('p/<slug:prop_code>/export/price-list.pdf',
         PriceListPDFView.as_view(), name='price_list_pdf'),
]
