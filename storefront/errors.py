"""
Error kinds raised by the storefront core.

All of them are recoverable. The HTTP layer maps each one to `status_code`
and reports `detail` as the response body.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, detail: str = ""):
        self.detail = detail or self.__class__.__doc__ or self.__class__.__name__
        super().__init__(self.detail)


class ConfigError(StorefrontError):
    """webhook endpoint is not configured"""
    status_code = 503


class NotFound(StorefrontError):
    """not found"""
    status_code = 404


class InsufficientStock(StorefrontError):
    """insufficient stock"""
    status_code = 400


class CheckoutError(StorefrontError):
    """checkout failed"""
    status_code = 502


class EmptyCartError(CheckoutError):
    """cart is empty"""
    status_code = 400


class CheckoutBusyError(CheckoutError):
    """a checkout is already in progress"""
    status_code = 409


class WebhookError(CheckoutError):
    """webhook rejected the order"""
    status_code = 502

    def __init__(self, detail: str = "", status: int = 0):
        self.status = status
        super().__init__(detail)


class TransportError(CheckoutError):
    """could not reach the webhook"""
    status_code = 504


class AuthError(StorefrontError):
    """invalid admin secret"""
    status_code = 401


class FetchError(StorefrontError):
    """could not fetch from the webhook"""
    status_code = 502
