import json

import pytest

from mediahub.udp.discovery_info import (
    ServerDiscoveryInfo,
    serialize_to_string,
    ADDRESS_KEY,
    ID_KEY,
    NAME_KEY,
)


@pytest.fixture
def info():
    return ServerDiscoveryInfo(
        address="http://192.168.1.15:8096",
        id="0f8fad5bd9cb469fa16570867728950e",
        name="Living room",
    )


def test_serialize(info):
    assert json.loads(serialize_to_string(info)) == {
        "Address": "http://192.168.1.15:8096",
        "Id": "0f8fad5bd9cb469fa16570867728950e",
        "Name": "Living room",
    }


def test_serialize_plain_object():
    assert serialize_to_string({"a": 1}) == '{"a": 1}'


def test_from_json(info):
    assert ServerDiscoveryInfo.from_json(serialize_to_string(info)) == info


@pytest.mark.parametrize("key", [ADDRESS_KEY, ID_KEY, NAME_KEY])
def test_from_json_missing_field(info, key):
    properties = info.to_dict()
    del properties[key]
    with pytest.raises(KeyError):
        _ = ServerDiscoveryInfo.from_json(json.dumps(properties))


def test_serialize_too_long(info):
    info = ServerDiscoveryInfo(address=info.address, id=info.id, name="1" * 1024)
    with pytest.raises(ValueError):
        _ = serialize_to_string(info)
