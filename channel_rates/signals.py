"""
Signal handlers for auto-populating per-season rows:
channel season discounts and room type season configs.
"""

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Channel, ChannelSeasonDiscount, RoomType, RoomTypeSeasonConfig, Season


@receiver(post_save, sender=Season)
def create_season_entries(sender, instance, created, **kwargs):
    """
    When a season is created, create discount rows for every channel and
    config rows for every room type of the same profile.
    """
    if created:
        for channel in Channel.objects.filter(profile=instance.profile):
            ChannelSeasonDiscount.objects.get_or_create(
                channel=channel,
                season=instance,
                defaults=channel.discount_values()
            )

        for room_type in RoomType.objects.filter(profile=instance.profile):
            RoomTypeSeasonConfig.objects.get_or_create(
                room_type=room_type,
                season=instance,
            )


@receiver(post_save, sender=RoomType)
def create_room_type_season_entries(sender, instance, created, **kwargs):
    """
    When a room type is created, create config rows for all seasons of
    its profile.
    """
    if created:
        for season in Season.objects.filter(profile=instance.profile):
            RoomTypeSeasonConfig.objects.get_or_create(
                room_type=instance,
                season=season,
            )


@receiver(post_save, sender=Channel)
def create_channel_season_entries(sender, instance, created, **kwargs):
    """
    When a channel is created, create discount rows for all seasons.
    When a channel is updated, sync non-customized season rows.
    """
    if created:
        for season in Season.objects.filter(profile=instance.profile):
            ChannelSeasonDiscount.objects.get_or_create(
                channel=instance,
                season=season,
                defaults=instance.discount_values()
            )
    else:
        for season_discount in instance.season_discounts.filter(is_customized=False):
            if season_discount.discount_values() != instance.discount_values():
                season_discount.channel = instance
                season_discount.sync_from_base()
