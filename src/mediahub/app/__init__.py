"""
Module providing the application side of discovery: what the local service is and where it can be reached.
"""

from .host import BasicApplicationHost as BasicApplicationHost
from .types import ServerApplicationHost as ServerApplicationHost
