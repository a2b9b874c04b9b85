"""
Exceptions raised by the channel rate engine and the Hotres client.
"""


class PricingError(Exception):
    """Base class for every calculation failure."""


class InvalidConfigurationError(PricingError):
    """
    Configuration that cannot produce a meaningful price.

    Raised for a non-positive season multiplier, a room with
    max_occupancy < 1, or a channel whose discounts and commission
    leave nothing for the owner.
    """

    def __init__(self, message, object_type=None, object_id=None):
        super().__init__(message)
        self.message = message
        self.object_type = object_type
        self.object_id = object_id

    def to_dict(self):
        return {
            'type': 'invalid_configuration',
            'object_type': self.object_type,
            'object_id': self.object_id,
            'message': self.message,
        }


class InvalidOccupancyError(PricingError):
    """Occupancy outside [1, room.max_occupancy]."""


class HotresError(Exception):
    """Failed request to the Hotres API (transport, HTTP or payload error)."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
