"""
Request rate limiting.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from due_diligence.config import settings

limiter = Limiter(key_func=get_remote_address)

RATE_LIMIT = f"{settings.rate_limit_requests}/minute"
