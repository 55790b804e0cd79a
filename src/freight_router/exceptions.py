class FreightRouterError(Exception):
    """Base exception for freight routing errors."""


class ExternalServiceError(FreightRouterError):
    """Raised when an upstream API call fails."""


class ResponseSchemaError(ExternalServiceError):
    """Raised when an upstream API returns a payload that does not match its schema."""


class InvalidLocationError(FreightRouterError):
    """Raised when an address cannot be resolved."""


class NoRouteFoundError(FreightRouterError):
    """Raised when the route query yields no usable candidates."""


class PolylineDecodeError(FreightRouterError):
    """Raised when an encoded polyline is truncated or contains invalid characters."""


class OrderParsingError(FreightRouterError):
    """Raised when order details extracted from an email are incomplete or malformed."""


class OfferGenerationError(FreightRouterError):
    """Raised when an offer email cannot be drafted from the route details."""


class ItemProcessingError(FreightRouterError):
    """Raised when one item of a batch fails; carries the item index."""

    def __init__(self, item_index: int, cause: Exception) -> None:
        super().__init__(f"Error processing item {item_index}: {cause}")
        self.item_index = item_index
        self.cause = cause
