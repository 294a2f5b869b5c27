from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)


def probe_endpoint(host: str, port: int, family: socket.AddressFamily, timeout: float = 1.0) -> bool:
    """Return True if a TCP connection to ``host`` over ``family`` succeeds."""
    try:
        infos = socket.getaddrinfo(host, port, family, socket.SOCK_STREAM)
    except (OSError, UnicodeError):
        logger.debug("Cannot resolve %s:%d (%s)", host, port, family.name)
        return False
    if not infos:
        return False

    af, socktype, proto, _, sockaddr = infos[0]
    logger.debug("%s:%d => %s", host, port, sockaddr[0])
    try:
        with socket.socket(af, socktype, proto) as sock:
            sock.settimeout(timeout)
            sock.connect(sockaddr)
    except OSError as exc:
        logger.debug("Probe %s:%d failed: %s", host, port, exc)
        return False
    return True


def probe_connectivity(
    ipv4_host: str,
    ipv6_host: str,
    port: int = 80,
    timeout: float = 1.0,
) -> tuple[bool, bool]:
    """Check outbound reachability over IPv4 and IPv6 independently."""
    return (
        probe_endpoint(ipv4_host, port, socket.AF_INET, timeout),
        probe_endpoint(ipv6_host, port, socket.AF_INET6, timeout),
    )
