"""Core contracts.

Protocols implemented by entities (serialization) and by the request engine
(transport). Builders depend on these, not on concrete adapters.
"""

from geocore.core.interfaces.serialization import FromJSON, ToMap
from geocore.core.interfaces.transport import GeocoreTransport

__all__ = ["FromJSON", "GeocoreTransport", "ToMap"]
