"""
Module defining the payload sent back to discovery clients.
"""

import json
from dataclasses import dataclass
from typing import Any

MAXIMUM_MESSAGE_SIZE = 1024

ADDRESS_KEY = "Address"
ID_KEY = "Id"
NAME_KEY = "Name"


@dataclass(frozen=True)
class ServerDiscoveryInfo:
    """
    Identifies a server instance to a discovery client.

    >>> info = ServerDiscoveryInfo(address="http://192.168.1.15:8096", id="abc", name="Example")
    >>> serialize_to_string(info)
    '{"Address": "http://192.168.1.15:8096", "Id": "abc", "Name": "Example"}'
    """

    address: str
    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {ADDRESS_KEY: self.address, ID_KEY: self.id, NAME_KEY: self.name}

    @classmethod
    def from_dict(cls, properties: dict[str, Any]) -> "ServerDiscoveryInfo":
        for key in (ADDRESS_KEY, ID_KEY, NAME_KEY):
            if key not in properties:
                raise KeyError(f"Discovery info does not contain the required field: {key}")
        return cls(
            address=properties[ADDRESS_KEY],
            id=properties[ID_KEY],
            name=properties[NAME_KEY],
        )

    @classmethod
    def from_json(cls, payload: str) -> "ServerDiscoveryInfo":
        return cls.from_dict(json.loads(payload))


def serialize_to_string(obj: Any) -> str:
    """
    Serializes a discovery payload to JSON.

    :param obj: A :class:`ServerDiscoveryInfo` or any JSON-serializable object.
    :raises ValueError: if the resulting message would not fit in a single discovery datagram.
    """
    if isinstance(obj, ServerDiscoveryInfo):
        obj = obj.to_dict()
    message = json.dumps(obj)
    if len(message.encode()) > MAXIMUM_MESSAGE_SIZE:
        raise ValueError(
            f"Discovery message exceeds the maximum message size of {MAXIMUM_MESSAGE_SIZE}"
        )
    return message
