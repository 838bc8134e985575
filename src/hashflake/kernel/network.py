"""
Best-effort node id discovery from the local IPv4 address

The default generator takes the lowest byte of this machine's private IPv4
address as its node id. In container networks where every pod gets its own
address on a /24 this is unique without configuration; anywhere else callers
should set the node id explicitly.
"""

import ipaddress
import socket

from hashflake.kernel.layout import NODE_ID_MASK
from hashflake.kernel.logging import get_logger

logger = get_logger(__name__)

_PRIVATE_NETWORKS = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
)

# Connecting a UDP socket only selects a route, nothing is sent
_ROUTE_PROBE_ADDRESS = ("10.255.255.255", 1)


def is_private_ipv4(address: ipaddress.IPv4Address) -> bool:
    """True for RFC 1918 addresses (10/8, 172.16/12, 192.168/16)"""
    return any(address in network for network in _PRIVATE_NETWORKS)


def _hostname_addresses() -> list[str]:
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError as e:
        logger.debug("Host name lookup failed", error=str(e))
        return []
    return [info[4][0] for info in infos]


def _routed_address() -> list[str]:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(_ROUTE_PROBE_ADDRESS)
            return [sock.getsockname()[0]]
    except OSError as e:
        logger.debug("Route probe failed", error=str(e))
        return []


def candidate_addresses() -> list[ipaddress.IPv4Address]:
    """Local IPv4 addresses in discovery order, loopback excluded"""
    seen: list[ipaddress.IPv4Address] = []
    for raw in _hostname_addresses() + _routed_address():
        try:
            address = ipaddress.IPv4Address(raw)
        except ValueError:
            continue
        if address.is_loopback or address.is_unspecified or address in seen:
            continue
        seen.append(address)
    return seen


def find_local_ipv4() -> ipaddress.IPv4Address | None:
    """Return the first private local IPv4 address, or None"""
    for address in candidate_addresses():
        if is_private_ipv4(address):
            return address
    return None


def detect_node_id() -> int:
    """
    Derive a node id from the local private IPv4 address

    Returns the low 8 bits of the address, or 0 when no private address is
    found. Never raises.
    """
    address = find_local_ipv4()
    if address is None:
        logger.info("No private IPv4 address found, using node id 0")
        return 0
    return int(address) & NODE_ID_MASK
