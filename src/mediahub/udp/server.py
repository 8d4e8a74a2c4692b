"""
Module providing the UDP discovery responder.

The server listens for discovery probes on a UDP port and answers each one, unicast, with a JSON description of
the local service. Each probe is answered on its own thread so that a slow or failing reply never holds up the
reception of the next datagram. There is no backpressure, and replies may complete in a different order from the
probes that caused them.
"""

import logging
import select
import threading
from enum import Enum
from socket import socket, AF_INET, SOCK_DGRAM, SOL_SOCKET, SO_REUSEADDR
from typing import NamedTuple

from mediahub.app.types import ServerApplicationHost, Serializer, EndpointParser
from mediahub.utilities.network import parse_endpoint, format_endpoint
from .decoding import match_datagram, DatagramMatch
from .discovery_info import ServerDiscoveryInfo, serialize_to_string
from .responders import ResponderRegistry, MatchKind

DISCOVERY_PORT = 7359
IP_ADDRESS_ANY = "0.0.0.0"
MAXIMUM_DATAGRAM_SIZE = 65535
DEFAULT_POLL_INTERVAL = 0.1

DISCOVERY_MESSAGE = "who is EmbyServer?"
LEGACY_DISCOVERY_MESSAGE = "who is MediaBrowserServer_v2?"
ARGUMENT_SEPARATOR = "|"


class ServerState(Enum):
    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


class InboundMessage(NamedTuple):
    data: bytes
    remote_endpoint: str


def _bind_socket(port: int) -> socket:
    # IPv4 UDP socket
    s = socket(AF_INET, SOCK_DGRAM)
    s.setsockopt(SOL_SOCKET, SO_REUSEADDR, 1)
    try:
        s.bind((IP_ADDRESS_ANY, port))
    except OSError:
        s.close()
        raise
    return s


class UdpServer:
    """
    Answers discovery probes on behalf of an application host.

    :param host: The application whose address, id and name are sent in replies.
    :param serializer: Converts the reply payload to a string.
    :param endpoint_parser: Converts a textual remote endpoint into a socket address.
    :param poll_interval: Longest time, in seconds, the receive loop waits for a datagram before checking whether
        the server has been stopped.
    """

    def __init__(
        self,
        host: ServerApplicationHost,
        *,
        serializer: Serializer = serialize_to_string,
        endpoint_parser: EndpointParser = parse_endpoint,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.logger = logging.getLogger(__name__)
        self.host = host
        self.poll_interval = poll_interval
        self._serializer = serializer
        self._parse_endpoint = endpoint_parser

        self._responders = ResponderRegistry()
        self._responders.register(
            DISCOVERY_MESSAGE, MatchKind.SUBSTRING, self.respond_to_discovery_message
        )
        self._responders.register(
            LEGACY_DISCOVERY_MESSAGE, MatchKind.EXACT, self.respond_to_discovery_message
        )
        self._responders.freeze()

        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._state = ServerState.CREATED
        self._socket: socket | None = None
        self._listen_thread: threading.Thread | None = None

    @property
    def responders(self) -> ResponderRegistry:
        return self._responders

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def port(self) -> int | None:
        """
        The port the server is bound to, or `None` if it is not running.
        """
        if self._state is not ServerState.RUNNING:
            return None
        return self._socket.getsockname()[1]

    def start(self, port: int = DISCOVERY_PORT):
        """
        Bind to the given port on all interfaces and start answering probes in the background.

        :param port: Port to listen on. Use 0 to pick a free port.
        :raises RuntimeError: if the server is already running, or has been stopped.
        """
        with self._lock:
            if self._state is ServerState.RUNNING:
                raise RuntimeError("UDP server already running!")
            if self._state is ServerState.STOPPED:
                raise RuntimeError("UDP server has been stopped and cannot be restarted.")
            self._socket = _bind_socket(port)
            self._listen_thread = threading.Thread(
                target=self._listen,
                args=(self._socket,),
                name="UdpServerListener",
                daemon=True,
            )
            self._state = ServerState.RUNNING
            self._listen_thread.start()
        self.logger.info(f"UDP discovery server listening on port {self.port}")

    def stop(self):
        """
        Stop receiving probes and release the socket.

        Replies that are already being prepared are not waited for.
        """
        with self._lock:
            if self._state is ServerState.STOPPED:
                return
            self._state = ServerState.STOPPED
            self._stopped.set()
            if self._socket is not None:
                self._socket.close()
            thread = self._listen_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def close(self):
        self.stop()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _listen(self, sock: socket):
        while not self._stopped.is_set():
            try:
                message = self._receive(sock)
                if message is not None:
                    self._on_message_received(message)
            except Exception:
                # a closed socket is how the loop is told to finish
                if self._stopped.is_set() or sock.fileno() == -1:
                    break
                self.logger.exception("Error in UDP receive loop")

    def _receive(self, sock: socket) -> InboundMessage | None:
        readable, _, _ = select.select([sock], [], [], self.poll_interval)
        if not readable:
            return None
        data, address = sock.recvfrom(MAXIMUM_DATAGRAM_SIZE)
        # port 0 only shows up when the socket is torn down mid-receive
        if not address or address[1] == 0:
            return None
        return InboundMessage(data, format_endpoint(address))

    def _on_message_received(self, message: InboundMessage):
        match = match_datagram(message.data, self._responders)
        if match is None:
            return
        # one thread per reply, never joined, so no reply can queue behind another
        threading.Thread(
            target=self._respond,
            args=(match, message.remote_endpoint),
            name="UdpServerResponder",
            daemon=True,
        ).start()

    def _respond(self, match: DatagramMatch, remote_endpoint: str):
        try:
            match.entry.handler(match.text, remote_endpoint, match.encoding)
        except Exception:
            self.logger.exception(
                f"Error responding to UDP message from {remote_endpoint}"
            )

    def respond_to_discovery_message(
        self, message_text: str, remote_endpoint: str, encoding: str
    ):
        """
        Reply to a discovery probe with the address, id and name of the host.

        A probe of the form ``who is EmbyServer?|argument`` additionally asks the host to treat ``argument`` as a
        loopback alias, whether or not a reply could be sent.
        """
        parts = message_text.split(ARGUMENT_SEPARATOR)

        local_url = self.host.get_local_api_url()
        if local_url:
            response = ServerDiscoveryInfo(
                address=local_url,
                id=self.host.system_id,
                name=self.host.friendly_name,
            )
            self.send_to_endpoint(
                self._serializer(response).encode(encoding), remote_endpoint
            )
        else:
            self.logger.warning(
                "Unable to respond to udp request because the local ip address could not be determined."
            )

        if len(parts) > 1:
            self.host.enable_loopback(parts[1])

    def send_text(self, text: str, address: str, port: int):
        """
        Send text, encoded as UTF-8, to the given address and port.
        """
        if text is None:
            raise ValueError("Cannot send empty text.")
        self.send_bytes(text.encode("utf-8"), address, port)

    def send_bytes(self, data: bytes, address: str, port: int):
        """
        Send a datagram to the given address and port.

        :raises ValueError: if the data or the address is empty.
        """
        if not data:
            raise ValueError("Cannot send an empty datagram.")
        if not address:
            raise ValueError("Cannot send a datagram without an address.")
        self._get_socket().sendto(data, (address, port))

    def send_to_endpoint(self, data: bytes, remote_endpoint: str):
        """
        Send a datagram to an endpoint of the form ``address:port``.

        Delivery is best effort: failures to parse the endpoint or to send are logged and not raised.

        :raises ValueError: if the data or the endpoint is empty.
        """
        if not data:
            raise ValueError("Cannot send an empty datagram.")
        if not remote_endpoint:
            raise ValueError("Cannot send a datagram without a remote endpoint.")
        try:
            address = self._parse_endpoint(remote_endpoint)
            self._get_socket().sendto(data, address)
            self.logger.info(f"Udp message sent to {remote_endpoint}")
        except Exception:
            self.logger.exception(f"Error sending message to {remote_endpoint}")

    def _get_socket(self) -> socket:
        if self._socket is None:
            raise RuntimeError("UDP server has not been started.")
        return self._socket
