"""HTTP transport used for every request a validation run issues.

The activities and the orchestrator only see the ``Transport`` interface;
``HttpxTransport`` is the production implementation.
"""

from wfs_ft_validator.transport.base import Transport
from wfs_ft_validator.transport.httpx_transport import HttpxTransport

__all__ = [
    "HttpxTransport",
    "Transport",
]
