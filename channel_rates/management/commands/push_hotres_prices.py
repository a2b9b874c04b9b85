"""
Management command to push computed prices to Hotres.

Sends every room × season occupancy ladder of a profile (one request per
channel with a Hotres rate id). Nothing is retried; failed attempts are
listed and make the command exit with an error.

Usage:
    python manage.py push_hotres_prices villa-baltica
    python manage.py push_hotres_prices villa-baltica --room 4 --season 12
    python manage.py push_hotres_prices villa-baltica --dry-run
"""

import json

from django.core.management.base import BaseCommand, CommandError

from channel_rates.exceptions import HotresError, PricingError
from channel_rates.services import HotresClient, calculate_occupancy_ladder, summarize_push
from channel_rates.services.hotres_service import build_push_payload

from ._profile import get_profile


class Command(BaseCommand):
    help = 'Push room prices per occupancy to the Hotres panel'

    def add_arguments(self, parser):
        parser.add_argument('property_code', type=str, help='Property code')
        parser.add_argument('--profile', type=int, help='Profile id (default: the default profile)')
        parser.add_argument('--room', type=str, help='Only this room type id')
        parser.add_argument('--season', type=str, help='Only this season id')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Print the payloads instead of sending them'
        )

    def handle(self, *args, **options):
        profile = get_profile(options['property_code'], options['profile'])
        object_id = profile.hotel.hotres_object_id
        if not object_id:
            raise CommandError(f"Property {profile.hotel.code} has no Hotres object id")

        inputs = profile.build_pricing_inputs()
        rooms = [r for r in inputs['rooms'] if r.hotres_type_id]
        seasons = inputs['seasons']
        channels = inputs['channels']

        if options['room']:
            rooms = [r for r in rooms if r.id == options['room']]
        if options['season']:
            seasons = [s for s in seasons if s.id == options['season']]
        if not rooms or not seasons:
            raise CommandError("Nothing to push (no matching Hotres rooms or seasons)")

        if options['dry_run']:
            try:
                self._print_payloads(rooms, seasons, channels, inputs['settings'])
            except PricingError as e:
                raise CommandError(f'Cannot price ladder: {e}')
            return

        client = HotresClient.from_settings()
        try:
            results = client.push_profile_prices(
                object_id, rooms, seasons, channels, inputs['settings']
            )
        except (HotresError, PricingError) as e:
            raise CommandError(f'Push failed: {e}')

        for result in results:
            status = 'ok' if result.success else 'FAILED'
            self.stdout.write(f"  {result.channel_id}: {status} {result.message}")

        success, message = summarize_push(results)
        if not success:
            raise CommandError(message)
        self.stdout.write(self.style.SUCCESS(f"\n✓ {message}"))

    def _print_payloads(self, rooms, seasons, channels, settings):
        targets = [c for c in channels if c.hotres_rate_id]
        for room in rooms:
            for season in seasons:
                ladder = calculate_occupancy_ladder(room, season, channels, settings)
                for channel in targets:
                    try:
                        payload = build_push_payload(
                            room, channel, season.start_date, season.end_date,
                            season.min_nights, ladder,
                        )
                    except HotresError as e:
                        self.stdout.write(self.style.ERROR(
                            f"{room.name} / {season.name} / {channel.id}: {e.message}"
                        ))
                        continue
                    self.stdout.write(json.dumps(payload))
