"""Rate limiting global / Global rate limiter.

Utilise slowapi pour limiter les requetes par IP ; les quotas par route
viennent des reglages (RATE_LIMIT_DEFAULT, RATE_LIMIT_EXPORT).
Per-IP limits with slowapi; per-route quotas come from settings.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
