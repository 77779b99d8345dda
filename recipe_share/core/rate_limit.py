from slowapi import Limiter
from slowapi.util import get_remote_address

from recipe_share.core.config import settings

# Initialize rate limiter - uses client IP address for rate limit key
# Disabled during testing
limiter = Limiter(key_func=get_remote_address, enabled=settings.ENVIRONMENT != "testing")
