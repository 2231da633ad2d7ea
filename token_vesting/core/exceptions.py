"""Custom exceptions for the vesting engine.

Every operation validates its inputs completely before touching the ledger,
so raising any of these leaves all state exactly as it was.
"""


class VestingError(Exception):
    """Base exception for all vesting engine errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotAuthorizedError(VestingError):
    """Raised when the caller lacks the role an operation requires."""

    def __init__(self, caller: str, required: str):
        message = f"{caller} is not authorized: {required} only"
        super().__init__(message, {"caller": caller, "required": required})
        self.caller = caller
        self.required = required


class WindowNotOpenError(VestingError):
    """Raised when an operation is attempted before the vesting start time."""

    def __init__(self, operation: str, now: int, start_time: int):
        message = f"{operation} before start (now={now}, start={start_time})"
        super().__init__(
            message,
            {"operation": operation, "now": now, "start_time": start_time},
        )
        self.operation = operation
        self.now = now
        self.start_time = start_time


class WindowClosedError(VestingError):
    """Raised when registering after the final whitelisting batch."""

    def __init__(self, operation: str = "whitelist"):
        super().__init__(f"{operation} no longer allowed", {"operation": operation})
        self.operation = operation


class AlreadyRegisteredError(VestingError):
    """Raised when some identities in a registration batch already have accounts."""

    def __init__(self, identities: list[str]):
        message = f"some users are already whitelisted: {', '.join(identities)}"
        super().__init__(message, {"identities": identities})
        self.identities = identities


class AlreadyEliminatedError(VestingError):
    """Raised when some identities in an elimination batch are already eliminated."""

    def __init__(self, identities: list[str]):
        message = f"some users are already eliminated: {', '.join(identities)}"
        super().__init__(message, {"identities": identities})
        self.identities = identities


class NothingToClaimError(VestingError):
    """Raised when a claim would transfer zero tokens."""

    def __init__(self, beneficiary: str):
        super().__init__(f"nothing to claim for {beneficiary}", {"beneficiary": beneficiary})
        self.beneficiary = beneficiary


class NothingToCollectError(VestingError):
    """Raised when no matured fee is available for the named beneficiaries."""

    def __init__(self, beneficiaries: list[str]):
        super().__init__("no fees to collect", {"beneficiaries": beneficiaries})
        self.beneficiaries = beneficiaries


class RequestExceedsMaxClaimableError(VestingError):
    """Raised when an extra claim request is larger than what may be released."""

    def __init__(self, beneficiary: str, requested: int, available: int):
        message = (
            f"requested claim amount > max claimable "
            f"(requested={requested}, available={available})"
        )
        super().__init__(
            message,
            {"beneficiary": beneficiary, "requested": requested, "available": available},
        )
        self.beneficiary = beneficiary
        self.requested = requested
        self.available = available


class InvalidParameterError(VestingError):
    """Raised when a parameter is out of bounds or batched inputs are malformed."""

    def __init__(self, field: str, value: str, reason: str):
        message = f"Invalid {field}={value}: {reason}"
        super().__init__(message, {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class ConfigurationError(VestingError):
    """Raised when a configuration file is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key
