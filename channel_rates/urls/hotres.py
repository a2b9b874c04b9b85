"""Hotres URL patterns: price push, occupancy sync."""

from django.urls import path
from channel_rates.views import HotresPushView, HotresOccupancySyncView

urlpatterns = [
    path('p/<slug:prop_code>/api/hotres/push/',
         HotresPushView.as_view(), name='hotres_push'),
    path('p/<slug:prop_code>/api/hotres/occupancy/',
         HotresOccupancySyncView.as_view(), name='hotres_occupancy'),
]
