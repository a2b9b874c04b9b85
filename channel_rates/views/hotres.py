"""
Hotres views: manual price push and occupancy sync.
"""

import logging

from django.db import transaction
from django.http import JsonResponse
from django.views.generic import View

from channel_rates.exceptions import HotresError, PricingError
from channel_rates.models import RoomTypeSeasonConfig
from channel_rates.services import HotresClient, calculate_occupancy_ladder, summarize_push

from .mixins import ProfileMixin, find_by_id

logger = logging.getLogger(__name__)


def get_hotres_client():
    return HotresClient.from_settings()


class HotresPushView(ProfileMixin, View):
    """
    Push one room's occupancy ladder for a season to Hotres.

    URL: /p/{prop_code}/api/hotres/push/
    POST: room, season, optional start_date / end_date (default: season dates)

    One request per channel with a Hotres rate id; failures are reported,
    never retried.
    """

    def post(self, request, *args, **kwargs):
        prop = self.get_property()
        inputs = self.get_pricing_inputs()
        room = find_by_id(inputs['rooms'], request.POST.get('room'), 'Room')
        season = find_by_id(inputs['seasons'], request.POST.get('season'), 'Season')

        start_date = request.POST.get('start_date') or season.start_date
        end_date = request.POST.get('end_date') or season.end_date

        try:
            ladder = calculate_occupancy_ladder(
                room, season, inputs['channels'], inputs['settings']
            )
            results = get_hotres_client().push_ladder(
                prop.hotres_object_id, room, start_date, end_date,
                season.min_nights, ladder, inputs['channels'],
            )
        except (ValueError, PricingError) as e:
            return JsonResponse({'success': False, 'message': str(e)}, status=400)
        except HotresError as e:
            logger.exception("Hotres push error")
            return JsonResponse({'success': False, 'message': e.message}, status=502)

        success, message = summarize_push(results)
        return JsonResponse({
            'success': success,
            'message': message,
            'results': [result.to_dict() for result in results],
        })


class HotresOccupancySyncView(ProfileMixin, View):
    """
    Read occupancy for a season from Hotres and cache it on the
    room × season configs.

    URL: /p/{prop_code}/api/hotres/occupancy/
    POST: season
    """

    def post(self, request, *args, **kwargs):
        prop = self.get_property()
        profile = self.get_profile()
        season = profile.seasons.filter(pk=request.POST.get('season')).first()
        if season is None:
            return JsonResponse({'success': False, 'message': 'Season not found'}, status=404)

        try:
            occupancy = get_hotres_client().fetch_season_occupancy_map(
                prop.hotres_object_id, season.start_date, season.end_date
            )
        except HotresError as e:
            logger.exception("Hotres occupancy error")
            return JsonResponse({'success': False, 'message': e.message}, status=502)

        updated = 0
        with transaction.atomic():
            configs = RoomTypeSeasonConfig.objects.filter(
                season=season, room_type__profile=profile
            ).select_related('room_type').exclude(room_type__hotres_type_id='')
            for config in configs:
                rate = occupancy.get(config.room_type.hotres_type_id)
                if rate is None:
                    continue
                config.occupancy_rate = rate
                config.save(update_fields=['occupancy_rate'])
                updated += 1

        return JsonResponse({
            'success': True,
            'season': {'id': season.pk, 'name': season.name},
            'occupancy': occupancy,
            'updated': updated,
        })
