"""
Sigil — External Clients
"""

from sigil.clients.redis import RedisClient

__all__ = ["RedisClient"]
