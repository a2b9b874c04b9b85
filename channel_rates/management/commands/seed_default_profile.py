"""
Management command to create a property with the starter pricing profile.

Creates three room types, five summer seasons and four channels
(Booking.com, Airbnb, Noclegi.pl, Noclegowo). Season discount rows and
room × season configs are filled in by signals.

Usage:
    python manage.py seed_default_profile villa-baltica
    python manage.py seed_default_profile villa-baltica --name "Villa Baltica" --year 2026
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from channel_rates.constants import INITIAL_CHANNELS, INITIAL_ROOMS, INITIAL_SEASONS
from channel_rates.models import Channel, Profile, Property, RoomType, Season


class Command(BaseCommand):
    help = 'Create a property with the default rooms, seasons and channels'

    def add_arguments(self, parser):
        parser.add_argument(
            'property_code',
            type=str,
            help='Property code (slug); created if missing'
        )
        parser.add_argument(
            '--name',
            type=str,
            help='Property name for a new property (default: the code)'
        )
        parser.add_argument(
            '--profile',
            type=str,
            default='Default',
            help='Profile name (default: "Default")'
        )
        parser.add_argument(
            '--year',
            type=int,
            default=None,
            help='Year the seasons are placed in (default: current year)'
        )

    def handle(self, *args, **options):
        code = options['property_code']
        year = options['year'] or timezone.now().year

        with transaction.atomic():
            prop, created = Property.objects.get_or_create(
                code=code,
                defaults={'name': options['name'] or code}
            )
            if created:
                self.stdout.write(f"Created property: {prop.name}")

            if Profile.objects.filter(hotel=prop, name=options['profile']).exists():
                raise CommandError(
                    f"Profile '{options['profile']}' already exists for {prop.code}"
                )

            profile = Profile.objects.create(
                hotel=prop,
                name=options['profile'],
                is_default=True,
            )

            for index, room in enumerate(INITIAL_ROOMS):
                RoomType.objects.create(profile=profile, sort_order=index, **room)

            for season in INITIAL_SEASONS:
                Season.objects.create(
                    profile=profile,
                    name=season['name'],
                    start_date=date(year, *season['start']),
                    end_date=date(year, *season['end']),
                    multiplier=season['multiplier'],
                    min_nights=season['min_nights'],
                )

            for index, channel in enumerate(INITIAL_CHANNELS):
                discounts = {
                    f'{kind}_percent': percent
                    for kind, percent in channel['discounts'].items()
                }
                Channel.objects.create(
                    profile=profile,
                    code=channel['code'],
                    name=channel['name'],
                    commission_percent=channel['commission_percent'],
                    color=channel['color'],
                    sort_order=index,
                    **discounts
                )

        self.stdout.write(self.style.SUCCESS(
            f"\n✓ Complete!"
            f"\n  Profile: {profile}"
            f"\n  Rooms: {len(INITIAL_ROOMS)}"
            f"\n  Seasons: {len(INITIAL_SEASONS)} ({year})"
            f"\n  Channels: {len(INITIAL_CHANNELS)}"
        ))
