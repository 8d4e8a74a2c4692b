"""
Module providing a basic application host, describing the local service to discovery clients.
"""

import ipaddress
import logging
import socket
import threading
import uuid

from mediahub.utilities.network import get_local_ip

DEFAULT_API_PORT = 8096
DEFAULT_SCHEME = "http"


class BasicApplicationHost:
    """
    Describes the local service: where its API can be reached, its unique id and its friendly name.

    :param name: Friendly name of the service. Defaults to the host name of the machine.
    :param address: Address the API is reachable at. If none is given, the first non-loopback IPV4 address of
        the machine is looked up whenever the API url is requested.
    :param api_port: Port the API listens on.
    :param scheme: Scheme of the API url.
    :param system_id: Unique id of the service. A random one is generated if none is given.
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        address: str | None = None,
        api_port: int = DEFAULT_API_PORT,
        scheme: str = DEFAULT_SCHEME,
        system_id: str | None = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.address = address
        self.api_port = api_port
        self.scheme = scheme
        self._friendly_name = name or socket.gethostname()
        self._system_id = system_id or uuid.uuid4().hex
        self._loopback_aliases: set[str] = set()
        self._lock = threading.Lock()

    @property
    def system_id(self) -> str:
        return self._system_id

    @property
    def friendly_name(self) -> str:
        return self._friendly_name

    def get_local_api_url(self) -> str | None:
        """
        :return: The url of the API as seen from the local network, or `None` if this machine has no known
            reachable address.
        """
        address = self.address or get_local_ip()
        if not address:
            return None
        if ":" in address:
            address = f"[{address}]"
        return f"{self.scheme}://{address}:{self.api_port}"

    def enable_loopback(self, argument: str):
        """
        Treat the given address as an alias of this machine.
        """
        alias = argument.strip()
        if not alias:
            return
        with self._lock:
            self._loopback_aliases.add(alias)
        self.logger.info(f"Enabled loopback for {alias}")

    @property
    def loopback_aliases(self) -> set[str]:
        with self._lock:
            return set(self._loopback_aliases)

    def is_loopback(self, address: str) -> bool:
        with self._lock:
            if address in self._loopback_aliases:
                return True
        try:
            return ipaddress.ip_address(address).is_loopback
        except ValueError:
            return address == "localhost"
