"""Asynchronous client for the Bynder digital asset management API."""

from loguru import logger

from .auth import AccessToken, OAuth2AuthorizationCode
from .client import BynderClient
from .config import ClientConfig, TransportAgents
from .errors import (
    BynderAPIError,
    BynderError,
    BynderValidationError,
    ConfigurationError,
    MissingCredentialError,
    TokenFormatError,
)
from .models import MediaItemsResult, MediaListParams
from .request import RequestExecutor
from .version import __version__

logger.disable(__name__)

__all__ = [
    "AccessToken",
    "BynderAPIError",
    "BynderClient",
    "BynderError",
    "BynderValidationError",
    "ClientConfig",
    "ConfigurationError",
    "MediaItemsResult",
    "MediaListParams",
    "MissingCredentialError",
    "OAuth2AuthorizationCode",
    "RequestExecutor",
    "TokenFormatError",
    "TransportAgents",
    "__version__",
]
