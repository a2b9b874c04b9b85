"""
View mixins and request parsing helpers.
"""

import logging

from django.http import Http404
from django.shortcuts import get_object_or_404

from channel_rates.constants import MAX_OCCUPANCY
from channel_rates.models import Profile, Property

logger = logging.getLogger(__name__)


class ProfileMixin:
    """
    Mixin resolving the property and pricing profile of a request.

    Property comes from the 'prop_code' URL kwarg; the profile from the
    optional ?profile=<id> parameter, else the property's default.
    """

    def get_property(self):
        return get_object_or_404(
            Property.objects.filter(is_active=True),
            code=self.kwargs.get('prop_code')
        )

    def get_profile(self):
        if not hasattr(self, '_profile'):
            prop = self.get_property()
            profile_id = self.request.GET.get('profile')
            if profile_id:
                profile = get_object_or_404(Profile, pk=profile_id, hotel=prop)
            else:
                profile = prop.get_default_profile()
                if profile is None:
                    raise Http404(f"Property '{prop.code}' has no pricing profile")
            self._profile = profile
        return self._profile

    def get_pricing_inputs(self):
        """Engine inputs (rooms, seasons, channels, settings) of the profile."""
        return self.get_profile().build_pricing_inputs()


def find_by_id(items, item_id, label):
    """
    Pick a domain object by id from a list.

    Raises:
        Http404: no such id
    """
    for item in items:
        if item.id == str(item_id):
            return item
    raise Http404(f"{label} '{item_id}' not found")


def parse_occupancy(value):
    """
    Parse the ?occupancy= parameter.

    Returns:
        MAX_OCCUPANCY for empty/'max', else a positive int

    Raises:
        ValueError: not a positive integer
    """
    if value in (None, '') or str(value).upper() == MAX_OCCUPANCY:
        return MAX_OCCUPANCY
    occupancy = int(value)
    if occupancy < 1:
        raise ValueError(f"Occupancy must be at least 1, got {occupancy}")
    return occupancy


def parse_overrides(values):
    """
    Parse repeated ?override=<room_id>:<season_id>:<occupancy> parameters.

    Returns:
        dict: {(room_id, season_id): occupancy}
    """
    overrides = {}
    for value in values:
        try:
            room_id, season_id, occupancy = value.split(':')
            overrides[(room_id, season_id)] = int(occupancy)
        except ValueError:
            raise ValueError(f"Invalid override '{value}', expected room:season:occupancy")
    return overrides
