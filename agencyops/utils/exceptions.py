"""
Exception handling utilities.

Defines categorized exception types for proper error handling.
"""

import aiohttp
from sqlalchemy.exc import OperationalError


class AgencyOpsError(Exception):
    """Base class for application errors."""
    pass


class ValidationError(AgencyOpsError):
    """Raised when input fails a business rule; shown to the caller."""
    pass


class NotFoundError(AgencyOpsError):
    """Raised when an entity required by an operation does not exist."""
    pass


# Exception categories based on handling strategy

# Must log but can continue - collaborator failures
MUST_LOG = (
    OperationalError,    # Database errors
    aiohttp.ClientError,  # Webhook / third-party HTTP errors
    TimeoutError,
)
