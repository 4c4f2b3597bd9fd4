"""External control adapters (EC2 instance manager and server control API)."""

from .base import AdapterError, InstanceAdapter, InstanceState, ServerControlAdapter
from .ec2 import Ec2InstanceAdapter
from .server_api import HttpServerControlAdapter

__all__ = [
    "AdapterError",
    "Ec2InstanceAdapter",
    "HttpServerControlAdapter",
    "InstanceAdapter",
    "InstanceState",
    "ServerControlAdapter",
]
