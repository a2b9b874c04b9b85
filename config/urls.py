"""
Root URLs: Django admin plus the channel_rates app (JSON API, exports,
Hotres actions).
"""

from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Channel Rates"
admin.site.site_title = "Channel Rates"
admin.site.index_title = "Properties, profiles and OTA channels"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('channel_rates.urls')),
]
