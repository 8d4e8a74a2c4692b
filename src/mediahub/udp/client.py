"""
A module containing a discovery client, for finding servers that answer discovery probes.
"""

import logging
import select
import time
from socket import socket, AF_INET, SOCK_DGRAM, SOL_SOCKET, SO_BROADCAST
from typing import Iterable, Optional, Set

from .decoding import UTF8
from .discovery_info import ServerDiscoveryInfo, MAXIMUM_MESSAGE_SIZE
from .server import DISCOVERY_PORT, DISCOVERY_MESSAGE, IP_ADDRESS_ANY, ARGUMENT_SEPARATOR

IP_ADDRESS_BROADCAST = "255.255.255.255"


def _connect_socket() -> socket:
    # IPv4 UDP socket
    s = socket(AF_INET, SOCK_DGRAM)
    # Enable broadcasting
    s.setsockopt(SOL_SOCKET, SO_BROADCAST, 1)
    return s


class DiscoveryClient:
    """
    Sends discovery probes and collects the replies.

    :param address: Address to send probes to. Defaults to the IPV4 broadcast address.
    :param port: Port servers are listening for probes on.
    :param encoding: Encoding to write probes in. Replies are expected in the same encoding.
    """

    def __init__(
        self,
        address: Optional[str] = None,
        port: Optional[int] = None,
        encoding: str = UTF8,
    ):
        if address is None:
            address = IP_ADDRESS_BROADCAST
        if port is None:
            port = DISCOVERY_PORT
        self.logger = logging.getLogger(__name__)
        self.address = address
        self.port = port
        self.encoding = encoding
        self._socket = _connect_socket()
        self._socket.bind((IP_ADDRESS_ANY, 0))

    def send_probe(self, message: str = DISCOVERY_MESSAGE, argument: Optional[str] = None):
        """
        Send a single discovery probe.

        :param message: The discovery phrase.
        :param argument: Optional argument appended to the phrase, asking servers to treat it as a loopback alias.
        """
        if argument is not None:
            message = f"{message}{ARGUMENT_SEPARATOR}{argument}"
        self._socket.sendto(message.encode(self.encoding), (self.address, self.port))

    def _check_for_messages(self, timeout):
        socket_list = [self._socket]
        readable, _, exceptional = select.select(socket_list, [], socket_list, timeout)
        if len(exceptional) > 0:
            raise ConnectionError("Exception on socket while checking for messages.")
        return len(readable) > 0

    def _receive_server(self) -> Optional[ServerDiscoveryInfo]:
        message, address = self._socket.recvfrom(MAXIMUM_MESSAGE_SIZE * 2)
        try:
            return ServerDiscoveryInfo.from_json(message.decode(self.encoding))
        except (ValueError, KeyError):
            self.logger.warning(f"Ignoring malformed discovery reply from {address}")
            return None

    def search_for_servers(
        self,
        search_time: float = 2.0,
        message: str = DISCOVERY_MESSAGE,
        argument: Optional[str] = None,
    ) -> Iterable[ServerDiscoveryInfo]:
        """
        Sends a probe and yields the servers that reply within the given search time.

        :param search_time: Time, in seconds, to wait for replies.
        :param message: The discovery phrase to send.
        :param argument: Optional argument to send along with the phrase.
        :return: Each distinct server found over the duration.
        """
        self.send_probe(message, argument)
        servers: Set[ServerDiscoveryInfo] = set()
        deadline = time.monotonic() + search_time
        while time.monotonic() < deadline:
            time_remaining = deadline - time.monotonic()
            if self._check_for_messages(timeout=max(time_remaining, 0)):
                server = self._receive_server()
                if server is not None and server not in servers:
                    servers.add(server)
                    yield server

    def close(self):
        self._socket.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
