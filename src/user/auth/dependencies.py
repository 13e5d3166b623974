from fastapi import Request

from loggers import get_logger
from src.user.auth.refresh_credential import SEPARATOR

logger = get_logger(__name__)

UNKNOWN_ORIGIN = "unknown"


def get_client_origin(request: Request) -> str:
    """
    Network origin the token pair is bound to: the peer address, already
    rewritten by the proxy middleware when the peer is a trusted proxy.
    A host that cannot be encoded into a refresh credential counts as unknown.
    """
    if request.client is None or not request.client.host:
        return UNKNOWN_ORIGIN
    host = request.client.host
    if SEPARATOR in host:
        logger.warning("[ClientOrigin] Unusable peer host %r", host)
        return UNKNOWN_ORIGIN
    return host
