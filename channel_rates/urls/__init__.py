"""
URL configuration package.

Combines the pricing and Hotres URL patterns into a single
urlpatterns list under the 'channel_rates' namespace.
"""

from .pricing import urlpatterns as pricing_urls
from .hotres import urlpatterns as hotres_urls

app_name = 'channel_rates'

urlpatterns = (
    pricing_urls
    + hotres_urls
)
