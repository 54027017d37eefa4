"""Limitation des connexions / Login rate limiting.

Clé = IP du client, première adresse de X-Forwarded-For derrière un proxy de chantier.
Key = client IP, first X-Forwarded-For address behind a proxy.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=client_ip)
