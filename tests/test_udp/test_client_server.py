import pytest

from mediahub.udp.client import DiscoveryClient
from mediahub.udp.discovery_info import ServerDiscoveryInfo
from mediahub.udp.server import UdpServer, LEGACY_DISCOVERY_MESSAGE
from mediahub.testing import assert_equal_soon
from test_udp_server import FakeHost, LOCAL_API_URL, SYSTEM_ID, FRIENDLY_NAME

EXPECTED_INFO = ServerDiscoveryInfo(address=LOCAL_API_URL, id=SYSTEM_ID, name=FRIENDLY_NAME)


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def server(host):
    with UdpServer(host, poll_interval=0.05) as server:
        server.start(0)
        yield server


@pytest.fixture
def client(server):
    client = DiscoveryClient("127.0.0.1", server.port)
    yield client
    client.close()


@pytest.mark.timeout(10)
def test_find_server(client):
    servers = list(client.search_for_servers(search_time=0.5))
    assert servers == [EXPECTED_INFO]


@pytest.mark.timeout(10)
def test_find_server_legacy_message(client):
    servers = list(
        client.search_for_servers(search_time=0.5, message=LEGACY_DISCOVERY_MESSAGE)
    )
    assert servers == [EXPECTED_INFO]


@pytest.mark.timeout(10)
def test_find_server_utf16(server):
    with DiscoveryClient("127.0.0.1", server.port, encoding="utf-16-le") as client:
        servers = list(client.search_for_servers(search_time=0.5))
    assert servers == [EXPECTED_INFO]


@pytest.mark.timeout(10)
def test_find_server_with_loopback(client, host):
    servers = list(client.search_for_servers(search_time=0.5, argument="192.0.2.10"))
    assert servers == [EXPECTED_INFO]
    assert_equal_soon(lambda: host.loopback_arguments, lambda: ["192.0.2.10"])


@pytest.mark.timeout(10)
def test_no_server_found(client, host):
    host.url = None
    servers = list(client.search_for_servers(search_time=0.3))
    assert servers == []
