"""Profile lookup shared by the management commands."""

from django.core.management.base import CommandError

from channel_rates.models import Profile, Property


def get_profile(property_code, profile_id=None):
    """
    Resolve a property's profile: the given id, else its default.

    Raises:
        CommandError: unknown property or profile
    """
    prop = Property.objects.filter(code=property_code).first()
    if prop is None:
        raise CommandError(f"Property not found: {property_code}")

    if profile_id:
        profile = Profile.objects.filter(hotel=prop, pk=profile_id).first()
    else:
        profile = prop.get_default_profile()

    if profile is None:
        raise CommandError(f"No pricing profile for property: {property_code}")
    return profile
