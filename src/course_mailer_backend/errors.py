"""Exception types shared across the backend."""


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""


class CatalogError(ConfigurationError):
    """Raised when the specialization catalog cannot be loaded."""


class MailDeliveryError(RuntimeError):
    """Raised by a mail transport when the message could not be delivered."""
