"""
Error taxonomy for the Storefront Service

Services raise these; main.py maps them to HTTP responses.
"""


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Missing or malformed input"""
    status_code = 400
    default_message = "Invalid request"


class AuthError(StorefrontError):
    """Missing, invalid or expired credentials"""
    status_code = 401
    default_message = "Invalid credentials"


class AuthorizationError(StorefrontError):
    """Authenticated but not allowed"""
    status_code = 403
    default_message = "Admin access required"


class NotFoundError(StorefrontError):
    """Requested resource does not exist"""
    status_code = 404
    default_message = "Not found"


class ConflictError(StorefrontError):
    """Duplicate unique key"""
    status_code = 409
    default_message = "Already exists"


class InternalError(StorefrontError):
    """Persistence or other unclassified failure"""
    status_code = 500
