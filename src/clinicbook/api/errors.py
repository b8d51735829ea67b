class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class ValidationError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("INVALID_INPUT", message, 422, details)


class NotFoundError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("NOT_FOUND", message, 404, details)


class ConflictError(APIError):
    def __init__(self, message: str, details: dict = None, code: str = "CONFLICT"):
        super().__init__(code, message, 409, details)


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Unauthorized", details: dict = None):
        super().__init__("UNAUTHORIZED", message, 401, details)


class RateLimitError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("RATE_LIMITED", message, 429, details)


class ServiceUnavailableError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("STORE_UNAVAILABLE", message, 503, details)


# Domain error code -> HTTP status
DOMAIN_ERROR_STATUS = {
    "DOCTOR_NOT_FOUND": 404,
    "APPOINTMENT_NOT_FOUND": 404,
    "DUPLICATE_DOCTOR": 409,
    "DUPLICATE_BOOKING": 409,
    "INVALID_STATUS_TRANSITION": 409,
    "INVALID_DOCTOR_DATA": 422,
    "INVALID_SHIFT": 422,
    "RATE_LIMIT_EXCEEDED": 429,
}


def status_for_domain_error(error_code: str) -> int:
    if error_code in DOMAIN_ERROR_STATUS:
        return DOMAIN_ERROR_STATUS[error_code]
    # Rejected slot outcomes carry their reason as the code
    return 409
