"""
Command line interface for running a UDP discovery server.
"""

import argparse
import logging
import textwrap

from rich.logging import RichHandler

from mediahub.app.host import BasicApplicationHost, DEFAULT_API_PORT, DEFAULT_SCHEME
from mediahub.udp.server import UdpServer, DISCOVERY_PORT, DEFAULT_POLL_INTERVAL
from mediahub.utilities.cli import suppress_keyboard_interrupt_as_cancellation


def handle_user_arguments(args=None) -> argparse.Namespace:
    """
    Parse the arguments from the command line.

    :return: The namespace of arguments read from the command line.
    """
    description = textwrap.dedent(
        """\
    Answer discovery probes on the local network with the address of this server.
    """
    )
    parser = argparse.ArgumentParser(description=description)

    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=DISCOVERY_PORT,
        help="UDP port to listen for discovery probes on.",
    )
    parser.add_argument(
        "-n",
        "--name",
        help="Give a friendly name to the server.",
    )
    parser.add_argument(
        "-a",
        "--address",
        default=None,
        help="Address to advertise. Defaults to the first non-loopback IPV4 address of this machine.",
    )
    parser.add_argument(
        "--api-port",
        type=int,
        default=DEFAULT_API_PORT,
        help="Port of the API advertised to clients.",
    )
    parser.add_argument(
        "--scheme",
        default=DEFAULT_SCHEME,
        choices=("http", "https"),
        help="Scheme of the API advertised to clients.",
    )
    parser.add_argument(
        "--id",
        dest="system_id",
        default=None,
        help="Unique id of the server. A random one is generated if not given.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help="Seconds the receive loop waits before checking for shutdown.",
    )

    arguments = parser.parse_args(args)
    return arguments


def initialise_server(arguments: argparse.Namespace) -> UdpServer:
    host = BasicApplicationHost(
        name=arguments.name,
        address=arguments.address,
        api_port=arguments.api_port,
        scheme=arguments.scheme,
        system_id=arguments.system_id,
    )
    return UdpServer(host, poll_interval=arguments.interval)


def main():
    """
    Entry point for the command line.
    """
    logging.basicConfig(
        level=logging.INFO, handlers=[RichHandler(rich_tracebacks=True)]
    )
    logging.captureWarnings(True)

    arguments = handle_user_arguments()

    with suppress_keyboard_interrupt_as_cancellation() as cancellation:
        with initialise_server(arguments) as server:
            server.start(arguments.port)
            print(
                f'Serving "{server.host.friendly_name}" ({server.host.system_id}), '
                f"discoverable on all interfaces on port {server.port}"
            )
            cancellation.wait_cancellation()
            print("Closing due to KeyboardInterrupt.")


if __name__ == "__main__":
    main()
