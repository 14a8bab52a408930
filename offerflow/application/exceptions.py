class CatalogReferenceError(LookupError):
    """Raised when an action references a scope, option or item absent from the offer catalog."""
    pass


class SelectionValidationError(ValueError):
    """Raised when a user action cannot be accepted in the current state (e.g. nothing chosen yet)."""
    pass


class ConfirmationInProgressError(RuntimeError):
    """Raised when a confirmation is requested while a previous one is still being saved."""
    pass


class OfferPersistenceError(RuntimeError):
    """Raised when the offer store fails (network errors, storage unavailable). Safe to retry."""
    pass


class OfferNotFoundError(LookupError):
    """Raised when no offer exists for the requested id."""
    pass
