"""
Module providing UDP discovery for media servers.

Clients broadcast a probe such as ``who is EmbyServer?`` over IPv4 UDP, written in UTF-8 or UTF-16. A server
answers each probe, unicast and in the same encoding, with a JSON description of itself:

.. code::

  {
    "Address": "http://192.168.1.15:8096",
    "Id": "0f8fad5bd9cb469fa16570867728950e",
    "Name": "Living room"
  }

The :class:`UdpServer` class answers probes, and the :class:`DiscoveryClient` class sends them and collects the
replies.
"""

from .server import UdpServer as UdpServer, DISCOVERY_PORT as DISCOVERY_PORT
from .client import DiscoveryClient as DiscoveryClient
from .discovery_info import ServerDiscoveryInfo as ServerDiscoveryInfo
from .responders import (
    MatchKind as MatchKind,
    ResponderEntry as ResponderEntry,
    ResponderRegistry as ResponderRegistry,
)

__version__ = "1.0.0"
