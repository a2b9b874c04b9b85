"""
Pricing constants and the starter configuration used by seed_default_profile.
"""

from decimal import Decimal


# Sentinel for "use each room's own maximum occupancy"
MAX_OCCUPANCY = 'MAX'

# Row error key for direct-price failures; channel codes may not use it
DIRECT_PRICE_ERROR_KEY = 'direct_price'

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_OBP_PER_PERSON = Decimal('30.00')
DEFAULT_BREAKFAST_PRICE = Decimal('50.00')
DEFAULT_FULL_BOARD_PRICE = Decimal('100.00')
MIN_PRICE = Decimal('50.00')

# Allowed shortfall (currency units) between estimated net and direct price
PROFITABILITY_TOLERANCE = Decimal('1')

# Hotres accepts pers1..pers8
HOTRES_MAX_PERSONS = 8

# =============================================================================
# DISCOUNT KINDS
# =============================================================================

# Canonical order of the sequential discount breakdown. first_minute and
# last_minute form the final combined "other" step.
DISCOUNT_KINDS = ('mobile', 'genius', 'seasonal', 'first_minute', 'last_minute')
OTHER_DISCOUNT_KINDS = ('first_minute', 'last_minute')

DEFAULT_DISCOUNT_LABELS = {
    'mobile': 'Mobile',
    'genius': 'Genius',
    'seasonal': 'Seasonal',
    'first_minute': 'First Minute',
    'last_minute': 'Last Minute',
}

MEAL_NONE = 'none'
MEAL_BREAKFAST = 'breakfast'
MEAL_FULL = 'full'

MEAL_OPTION_CHOICES = [
    (MEAL_NONE, 'Room Only'),
    (MEAL_BREAKFAST, 'Breakfast'),
    (MEAL_FULL, 'Full Board'),
]

# =============================================================================
# STARTER CONFIGURATION
# =============================================================================

INITIAL_CHANNELS = [
    {
        'code': 'booking',
        'name': 'Booking.com',
        'commission_percent': Decimal('20.00'),
        'color': '#003580',
        'discounts': {'mobile': Decimal('10.00'), 'genius': Decimal('10.00')},
    },
    {
        'code': 'airbnb',
        'name': 'Airbnb',
        'commission_percent': Decimal('16.00'),
        'color': '#FF5A5F',
        'discounts': {'first_minute': Decimal('15.00')},
    },
    {
        'code': 'noclegi',
        'name': 'Noclegi.pl',
        'commission_percent': Decimal('12.00'),
        'color': '#34D399',
        'discounts': {},
    },
    {
        'code': 'noclegowo',
        'name': 'Noclegowo',
        'commission_percent': Decimal('10.00'),
        'color': '#FBBF24',
        'discounts': {},
    },
]

INITIAL_ROOMS = [
    {'name': 'Room', 'max_occupancy': 2, 'base_price_peak': Decimal('200.00'),
     'min_obp_occupancy': 1, 'obp_per_person': Decimal('30.00')},
    {'name': 'Studio', 'max_occupancy': 3, 'base_price_peak': Decimal('300.00'),
     'min_obp_occupancy': 2, 'obp_per_person': Decimal('30.00')},
    {'name': 'Cottage', 'max_occupancy': 6, 'base_price_peak': Decimal('600.00'),
     'min_obp_occupancy': 3, 'obp_per_person': Decimal('30.00')},
]

# Dates are (month, day) pairs, placed in the requested year by the seeder
INITIAL_SEASONS = [
    {'name': 'May Weekend', 'start': (5, 1), 'end': (5, 5),
     'multiplier': Decimal('1.10'), 'min_nights': 4},
    {'name': 'Pre-Peak', 'start': (5, 6), 'end': (6, 25),
     'multiplier': Decimal('0.85'), 'min_nights': 2},
    {'name': 'Festival', 'start': (6, 26), 'end': (7, 2),
     'multiplier': Decimal('1.50'), 'min_nights': 4},
    {'name': 'Peak (July/August)', 'start': (7, 3), 'end': (8, 17),
     'multiplier': Decimal('1.00'), 'min_nights': 5},
    {'name': 'End of Summer', 'start': (8, 18), 'end': (8, 31),
     'multiplier': Decimal('0.90'), 'min_nights': 3},
]
