from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from ipaddress import IPv4Network, IPv6Network, ip_address, ip_network

from starlette.types import ASGIApp, Receive, Scope, Send

TrustedNetwork = IPv4Network | IPv6Network


@dataclass(frozen=True)
class TrustedProxies:
    """
    The set of peers allowed to speak for the client. Entries are CIDR blocks,
    single addresses, literal host names, or ``*`` for everyone.
    """

    trust_all: bool = False
    networks: tuple[TrustedNetwork, ...] = ()
    names: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def parse(cls, entries: Iterable[str]) -> TrustedProxies:
        trust_all = False
        networks: list[TrustedNetwork] = []
        names: set[str] = set()

        for entry in (item.strip() for item in entries):
            if not entry:
                continue
            if entry == "*":
                trust_all = True
                continue
            try:
                networks.append(ip_network(entry, strict=False))
            except ValueError:
                names.add(entry)

        return cls(trust_all, tuple(networks), frozenset(names))

    def __contains__(self, host: object) -> bool:
        if not isinstance(host, str):
            return False
        if self.trust_all or host in self.names:
            return True
        try:
            address = ip_address(host)
        except ValueError:
            return False
        return any(address in network for network in self.networks)

    def resolve_client(self, forwarded_for: str) -> str | None:
        """
        Pick the client from an X-Forwarded-For chain: the right-most hop that
        is not itself a trusted proxy, or the left-most hop when every hop is
        trusted.

        A chain holding anything other than IP addresses is ignored as a whole
        and None is returned, so the socket peer stays the client.
        """
        hops = [hop.strip() for hop in forwarded_for.split(",") if hop.strip()]
        if not hops or not all(_is_ip_address(hop) for hop in hops):
            return None
        if not self.trust_all:
            for hop in reversed(hops):
                if hop not in self:
                    return hop
        return hops[0]


def _is_ip_address(value: str) -> bool:
    try:
        ip_address(value)
    except ValueError:
        return False
    return True


def _header(headers: Sequence[tuple[bytes, bytes]], name: bytes) -> str | None:
    for key, value in headers:
        if key.lower() == name:
            return value.decode("latin-1")
    return None


class TrustedProxyHeadersMiddleware:
    """
    Rewrites the client address and scheme from X-Forwarded-For and
    X-Forwarded-Proto, but only when the direct peer is a trusted proxy.
    Requests from any other peer keep their socket address.
    """

    def __init__(self, app: ASGIApp, trusted_hosts: Iterable[str]) -> None:
        self.app = app
        self.proxies = TrustedProxies.parse(trusted_hosts)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            self._apply_forwarded_headers(scope)
        await self.app(scope, receive, send)

    def _apply_forwarded_headers(self, scope: Scope) -> None:
        peer = scope.get("client")
        if not peer or peer[0] not in self.proxies:
            return

        headers = scope.get("headers") or []

        proto = _header(headers, b"x-forwarded-proto")
        scheme = proto.split(",")[0].strip() if proto else ""
        if scheme:
            scope["scheme"] = scheme

        forwarded_for = _header(headers, b"x-forwarded-for")
        client = self.proxies.resolve_client(forwarded_for) if forwarded_for else None
        if client:
            scope["client"] = (client, 0)
