"""Outbound HTTP clients."""
from .discord import DiscordClient, DiscordError
from .identity import IdentityClient

__all__ = [
    "DiscordClient",
    "DiscordError",
    "IdentityClient",
]
