import socket

import pytest

import mediahub.app.host as host_module
from mediahub.app.host import BasicApplicationHost, DEFAULT_API_PORT


def test_local_api_url_configured_address():
    host = BasicApplicationHost(address="192.168.1.15")
    assert host.get_local_api_url() == f"http://192.168.1.15:{DEFAULT_API_PORT}"


def test_local_api_url_ipv6_address():
    host = BasicApplicationHost(address="fe80::1", api_port=8920, scheme="https")
    assert host.get_local_api_url() == "https://[fe80::1]:8920"


def test_local_api_url_detected_address(monkeypatch):
    monkeypatch.setattr(host_module, "get_local_ip", lambda: "10.0.0.5")
    host = BasicApplicationHost(api_port=1234)
    assert host.get_local_api_url() == "http://10.0.0.5:1234"


def test_local_api_url_unknown_address(monkeypatch):
    monkeypatch.setattr(host_module, "get_local_ip", lambda: None)
    host = BasicApplicationHost()
    assert host.get_local_api_url() is None


def test_default_name():
    assert BasicApplicationHost().friendly_name == socket.gethostname()


def test_given_name_and_id():
    host = BasicApplicationHost(name="Living room", system_id="abc")
    assert host.friendly_name == "Living room"
    assert host.system_id == "abc"


def test_generated_ids_are_unique():
    first, second = BasicApplicationHost(), BasicApplicationHost()
    assert len(first.system_id) == 32
    assert first.system_id != second.system_id


def test_enable_loopback():
    host = BasicApplicationHost()
    assert not host.is_loopback("192.0.2.10")
    host.enable_loopback(" 192.0.2.10 ")
    assert host.loopback_aliases == {"192.0.2.10"}
    assert host.is_loopback("192.0.2.10")


def test_enable_loopback_empty_argument():
    host = BasicApplicationHost()
    host.enable_loopback("  ")
    assert host.loopback_aliases == set()


@pytest.mark.parametrize(
    "address, expected",
    [
        ("127.0.0.1", True),
        ("::1", True),
        ("localhost", True),
        ("192.168.1.15", False),
        ("example.com", False),
    ],
)
def test_is_loopback(address, expected):
    assert BasicApplicationHost().is_loopback(address) == expected
