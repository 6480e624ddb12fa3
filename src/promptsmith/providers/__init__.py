from promptsmith.providers.base import ConnectionPool, ImageGenerator, ProviderClient, TextGenerator, VideoGenerator
from promptsmith.providers.errors import ClientConfigError, ClientError, ClientNotFoundError, ProviderClientError
from promptsmith.providers.manager import ClientManager, determine_client_type

__all__ = [
    "ClientConfigError",
    "ClientError",
    "ClientManager",
    "ClientNotFoundError",
    "ConnectionPool",
    "ImageGenerator",
    "ProviderClient",
    "ProviderClientError",
    "TextGenerator",
    "VideoGenerator",
    "determine_client_type",
]
