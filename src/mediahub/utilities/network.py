"""
Helpers for finding local addresses and converting between textual endpoints and socket addresses.
"""

import ipaddress
import socket

import psutil


def get_ipv4_addresses() -> list:
    """
    Gets all the IPV4 addresses currently available on all interfaces that are up.

    :return: A list of address entries, as returned by :func:`psutil.net_if_addrs`, each with `family`,
        `address`, `netmask`, `broadcast` and `ptp` fields.
    """
    active_ifs = {name for name, stats in psutil.net_if_stats().items() if stats.isup}
    valid_ifs = {
        name: addrs
        for name, addrs in psutil.net_if_addrs().items()
        if name in active_ifs
    }

    return [
        addr
        for name, addrs in valid_ifs.items()
        for addr in addrs
        if addr.family == socket.AddressFamily.AF_INET
    ]


def get_local_ip(ipv4_addrs: list | None = None) -> str | None:
    """
    Gets the first non-loopback IPV4 address of this machine.

    :param ipv4_addrs: Optional address entries to choose from. If none are provided, the addresses of all
        interfaces that are up will be used.
    :return: The address, or `None` if the machine has no externally reachable IPV4 address.
    """
    if ipv4_addrs is None:
        ipv4_addrs = get_ipv4_addresses()
    return next(
        (
            item.address
            for item in ipv4_addrs
            if not ipaddress.ip_address(item.address).is_loopback
        ),
        None,
    )


def parse_endpoint(text: str) -> tuple[str, int]:
    """
    Parses an endpoint of the form ``a.b.c.d:port`` or ``[v6-address]:port``.

    :param text: The endpoint to parse.
    :return: A ``(host, port)`` socket address.
    :raises ValueError: if the text is not a valid IP endpoint.
    """
    if text is None:
        raise ValueError("Cannot parse an empty endpoint.")
    host, separator, port_text = text.strip().rpartition(":")
    if not separator or not host:
        raise ValueError(f"Given endpoint {text} does not contain a host and port.")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        raise ValueError(f"Given endpoint {text} does not contain a valid IP address.")
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Given endpoint {text} does not contain a valid port.")
    if not 0 < port <= 65535:
        raise ValueError(f"Given endpoint {text} has a port out of range.")
    return str(address), port


def format_endpoint(address: tuple) -> str:
    """
    Formats a socket address as returned by :meth:`socket.socket.recvfrom` into an endpoint string that
    :func:`parse_endpoint` accepts.
    """
    host, port = address[0], address[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"
