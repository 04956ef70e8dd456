"""Rate limiting singleton using slowapi."""

from fastapi import Request
from slowapi import Limiter


def client_ip(request: Request) -> str:
    """Peer address of the request.

    X-Forwarded-For is not read here: ProxyHeadersMiddleware has already
    rewritten ``request.client`` when the request came through a trusted proxy.
    """
    return request.client.host if request.client else "unknown"


limiter = Limiter(key_func=client_ip)
