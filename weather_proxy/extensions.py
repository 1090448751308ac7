from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Limits and storage come from the RATELIMIT_* config keys. The instance is
# shared by the route decorators, so with several apps in one process the
# last app passed to init_app decides whether limiting is enabled.
limiter = Limiter(key_func=get_remote_address)
