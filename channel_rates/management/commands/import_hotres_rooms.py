"""
Management command to import room types from Hotres.

New room types get a starter peak price; existing ones (matched by
Hotres type id) only have their name and max occupancy refreshed.

Usage:
    python manage.py import_hotres_rooms villa-baltica
    python manage.py import_hotres_rooms villa-baltica --profile 3 --dry-run
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from channel_rates.exceptions import HotresError
from channel_rates.models import RoomType
from channel_rates.services import HotresClient

from ._profile import get_profile


class Command(BaseCommand):
    help = 'Import room types from the Hotres panel'

    def add_arguments(self, parser):
        parser.add_argument('property_code', type=str, help='Property code')
        parser.add_argument(
            '--profile',
            type=int,
            help='Profile id (default: the property default profile)'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be imported without saving'
        )

    def handle(self, *args, **options):
        profile = get_profile(options['property_code'], options['profile'])
        object_id = profile.hotel.hotres_object_id
        if not object_id:
            raise CommandError(f"Property {profile.hotel.code} has no Hotres object id")

        try:
            rooms = HotresClient.from_settings().fetch_rooms(object_id)
        except HotresError as e:
            raise CommandError(f'Hotres import failed: {e.message}')

        self.stdout.write(f"Found {len(rooms)} room types in Hotres")

        if options['dry_run']:
            for room in rooms:
                self.stdout.write(
                    f"  {room.hotres_type_id}: {room.name} (max {room.max_occupancy})"
                )
            self.stdout.write(self.style.WARNING("Dry run, nothing saved"))
            return

        created_count = 0
        updated_count = 0

        with transaction.atomic():
            for room in rooms:
                existing = RoomType.objects.filter(
                    profile=profile, hotres_type_id=room.hotres_type_id
                ).first()

                if existing is None:
                    RoomType.objects.create(
                        profile=profile,
                        name=room.name,
                        max_occupancy=room.max_occupancy,
                        base_price_peak=room.base_price_peak,
                        obp_per_person=room.obp_per_person,
                        min_obp_occupancy=room.min_obp_occupancy,
                        hotres_type_id=room.hotres_type_id,
                        sort_order=room.sort_order,
                    )
                    created_count += 1
                    self.stdout.write(f"  Created: {room.name}")
                else:
                    existing.name = room.name
                    existing.max_occupancy = room.max_occupancy
                    existing.save(update_fields=['name', 'max_occupancy'])
                    updated_count += 1

        self.stdout.write(self.style.SUCCESS(
            f"\n✓ Complete!"
            f"\n  Created: {created_count} room types"
            f"\n  Updated: {updated_count} room types"
        ))
