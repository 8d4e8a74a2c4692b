"""
Command line interface for listing the servers that answer discovery probes.
"""

import argparse
import logging
import textwrap

from rich.logging import RichHandler

from mediahub.udp.client import DiscoveryClient, IP_ADDRESS_BROADCAST
from mediahub.udp.decoding import ENCODINGS
from mediahub.udp.server import DISCOVERY_PORT


def handle_user_arguments(args=None) -> argparse.Namespace:
    description = textwrap.dedent(
        """\
    List the servers that answer discovery probes on the local network.
    """
    )
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("-p", "--port", type=int, default=DISCOVERY_PORT)
    parser.add_argument(
        "-a",
        "--address",
        default=IP_ADDRESS_BROADCAST,
        help="Address to send the probe to.",
    )
    parser.add_argument(
        "-t",
        "--time",
        dest="search_time",
        type=float,
        default=2.0,
        help="Seconds to wait for replies.",
    )
    parser.add_argument("--encoding", choices=ENCODINGS, default=ENCODINGS[0])
    parser.add_argument(
        "--loopback",
        default=None,
        metavar="ADDRESS",
        help="Ask the servers found to treat this address as a loopback alias.",
    )
    return parser.parse_args(args)


def main():
    logging.basicConfig(handlers=[RichHandler(rich_tracebacks=True)])
    logging.captureWarnings(True)

    arguments = handle_user_arguments()

    found = 0
    with DiscoveryClient(
        arguments.address, arguments.port, encoding=arguments.encoding
    ) as client:
        for server in client.search_for_servers(
            search_time=arguments.search_time, argument=arguments.loopback
        ):
            found += 1
            print(f"{server.name} ({server.id}): {server.address}")

    if found == 0:
        print("No servers found.")


if __name__ == "__main__":
    main()
