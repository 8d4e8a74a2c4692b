from typing import Any, Callable, Protocol


class ServerApplicationHost(Protocol):
    """
    The application a discovery responder answers for.
    """

    @property
    def system_id(self) -> str: ...

    @property
    def friendly_name(self) -> str: ...

    def get_local_api_url(self) -> str | None: ...

    def enable_loopback(self, argument: str) -> None: ...


Serializer = Callable[[Any], str]
EndpointParser = Callable[[str], tuple[str, int]]
