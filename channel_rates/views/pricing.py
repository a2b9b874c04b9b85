"""
Pricing views: grid, occupancy ladder, reverse calculator, summary,
configuration check and exports.

All prices are computed on request from the stored profile; nothing
derived is saved.
"""

import logging

from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET
from django.views.generic import View

from channel_rates.constants import MAX_OCCUPANCY
from channel_rates.exceptions import PricingError
from channel_rates.services import (
    build_price_list_pdf,
    build_summary,
    calculate_occupancy_ladder,
    calculate_required_base_price,
    export_grid_csv,
    generate_pricing_grid,
    validate_configuration,
)

from .mixins import ProfileMixin, find_by_id, parse_occupancy, parse_overrides

logger = logging.getLogger(__name__)


def channel_payload(channel):
    return {
        'id': channel.id,
        'name': channel.name,
        'color': channel.color,
        'commission_pct': float(channel.commission_pct),
        'hotres_rate_id': channel.hotres_rate_id,
        'discount_labels': channel.discount_labels,
    }


class ProfileGridMixin(ProfileMixin):
    """Grid built from the request's ?occupancy= and ?override= parameters."""

    def get_grid(self, inputs):
        occupancy = parse_occupancy(self.request.GET.get('occupancy'))
        overrides = parse_overrides(self.request.GET.getlist('override'))
        grid = generate_pricing_grid(occupancy=occupancy, overrides=overrides, **inputs)
        return occupancy, grid


# =============================================================================
# GRID & LADDER
# =============================================================================

class PricingGridView(ProfileGridMixin, View):
    """
    Pricing grid as JSON.

    URL: /p/{prop_code}/api/grid/
    Params: profile (id), occupancy ('max' or N), override (room:season:N, repeatable)
    """

    def get(self, request, *args, **kwargs):
        profile = self.get_profile()
        inputs = self.get_pricing_inputs()

        try:
            occupancy, grid = self.get_grid(inputs)
        except ValueError as e:
            return JsonResponse({'success': False, 'message': str(e)}, status=400)

        return JsonResponse({
            'success': True,
            'profile': {'id': profile.pk, 'name': profile.name},
            'occupancy': occupancy,
            'channels': [channel_payload(c) for c in inputs['channels']],
            'rows': [row.to_dict() for row in grid],
            'error_count': sum(1 for row in grid if not row.is_valid),
        })


class OccupancyLadderView(ProfileMixin, View):
    """
    Prices for every occupancy of one room in one season.

    URL: /p/{prop_code}/api/ladder/?room=<id>&season=<id>
    """

    def get(self, request, *args, **kwargs):
        inputs = self.get_pricing_inputs()
        room = find_by_id(inputs['rooms'], request.GET.get('room'), 'Room')
        season = find_by_id(inputs['seasons'], request.GET.get('season'), 'Season')

        try:
            ladder = calculate_occupancy_ladder(
                room, season, inputs['channels'], inputs['settings']
            )
        except PricingError as e:
            logger.warning("Ladder failed for room=%s season=%s: %s", room.id, season.id, e)
            return JsonResponse({'success': False, 'message': str(e)}, status=400)

        return JsonResponse({
            'success': True,
            'room': {'id': room.id, 'name': room.name, 'max_occupancy': room.max_occupancy},
            'season': {'id': season.id, 'name': season.name},
            'rows': [row.to_dict() for row in ladder],
        })


# =============================================================================
# CALCULATOR, SUMMARY, VALIDATION
# =============================================================================

class RequiredBasePriceView(ProfileMixin, View):
    """
    Reverse calculator: base price needed for a target net.

    URL: /p/{prop_code}/api/calculator/?room=<id>&season=<id>&occupancy=N&target=<amount>
    """

    def get(self, request, *args, **kwargs):
        inputs = self.get_pricing_inputs()
        room = find_by_id(inputs['rooms'], request.GET.get('room'), 'Room')
        season = find_by_id(inputs['seasons'], request.GET.get('season'), 'Season')

        try:
            occupancy = parse_occupancy(request.GET.get('occupancy'))
            if occupancy == MAX_OCCUPANCY:
                occupancy = room.max_occupancy
            result = calculate_required_base_price(
                request.GET.get('target', ''), room, season, occupancy,
                inputs['channels'], inputs['settings'],
            )
        except (ArithmeticError, ValueError, PricingError) as e:
            logger.warning("Calculator failed for room=%s season=%s: %s", room.id, season.id, e)
            return JsonResponse({'success': False, 'message': str(e)}, status=400)

        return JsonResponse({
            'success': True,
            'target_net': float(result['target_net']),
            'occupancy': result['occupancy'],
            'obp_deduction': float(result['obp_deduction']),
            'meal_supplement': float(result['meal_supplement']),
            'required_base_price': result['required_base_price'],
            'channels': {cid: calc.to_dict() for cid, calc in result['channels'].items()},
            'errors': result['errors'],
        })


class SummaryView(ProfileGridMixin, View):
    """
    Dashboard figures (KPIs, price trend, room share, channel profitability).

    URL: /p/{prop_code}/api/summary/
    """

    def get(self, request, *args, **kwargs):
        inputs = self.get_pricing_inputs()
        try:
            _, grid = self.get_grid(inputs)
        except ValueError as e:
            return JsonResponse({'success': False, 'message': str(e)}, status=400)

        summary = build_summary(grid, inputs['rooms'], inputs['seasons'], inputs['channels'])
        return JsonResponse({'success': True, **summary})


class ValidationView(ProfileMixin, View):
    """
    Configuration problems of a profile.

    URL: /p/{prop_code}/api/validation/
    """

    def get(self, request, *args, **kwargs):
        inputs = self.get_pricing_inputs()
        issues = validate_configuration(inputs['rooms'], inputs['seasons'], inputs['channels'])
        return JsonResponse({
            'success': True,
            'valid': not issues,
            'issues': issues,
        })


# =============================================================================
# EXPORTS
# =============================================================================

class GridCSVView(ProfileGridMixin, View):
    """
    Export the pricing grid as CSV.

    URL: /p/{prop_code}/export/grid.csv
    """

    def get(self, request, *args, **kwargs):
        prop = self.get_property()
        inputs = self.get_pricing_inputs()
        try:
            _, grid = self.get_grid(inputs)
        except ValueError as e:
            return HttpResponse(str(e), status=400)

        response = HttpResponse(export_grid_csv(grid, inputs['channels']), content_type='text/csv')
        filename = f"pricing_grid_{prop.code}_{timezone.now().strftime('%Y%m%d')}.csv"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response


class PriceListPDFView(ProfileGridMixin, View):
    """
    Printable price list for one season.

    URL: /p/{prop_code}/export/price-list.pdf?season=<id>
    """

    def get(self, request, *args, **kwargs):
        prop = self.get_property()
        inputs = self.get_pricing_inputs()

        if not inputs['rooms'] or not inputs['seasons']:
            return HttpResponse("No data available for PDF export", status=400)

        season_id = request.GET.get('season')
        season = (
            find_by_id(inputs['seasons'], season_id, 'Season')
            if season_id else inputs['seasons'][0]
        )

        try:
            _, grid = self.get_grid({**inputs, 'seasons': [season]})
        except ValueError as e:
            return HttpResponse(str(e), status=400)

        pdf = build_price_list_pdf(
            prop.name, season, grid, inputs['channels'], currency=prop.currency_symbol
        )

        response = HttpResponse(pdf, content_type='application/pdf')
        filename = f"price_list_{prop.code}_{season.id}_{timezone.now().strftime('%Y%m%d')}.pdf"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response


@require_GET
def health(request):
    """Liveness probe."""
    return JsonResponse({'status': 'ok'})
