from importlib.resources import files

import pytest


@pytest.mark.parametrize(
    "package", ["mediahub.app", "mediahub.testing", "mediahub.udp", "mediahub.utilities"]
)
def test_package_is_typed(package):
    assert files(package).joinpath("py.typed").is_file()
