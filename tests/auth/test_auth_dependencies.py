from src.user.auth.dependencies import UNKNOWN_ORIGIN, get_client_origin
from tests.helpers.requests import build_request


def test_client_origin_is_peer_host() -> None:
    request = build_request(client=("203.0.113.7", 4242))

    assert get_client_origin(request) == "203.0.113.7"


def test_client_origin_without_peer_is_unknown() -> None:
    assert get_client_origin(build_request(client=None)) == UNKNOWN_ORIGIN


def test_client_origin_with_separator_is_unknown() -> None:
    request = build_request(client=("evil|203.0.113.5", 0))

    assert get_client_origin(request) == UNKNOWN_ORIGIN
