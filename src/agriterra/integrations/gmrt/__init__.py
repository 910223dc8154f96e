"""
GMRT point server integration.

Provides land and seafloor elevations, one coordinate per request.
"""

from agriterra.integrations.gmrt.client import GMRTClientConfig, GMRTElevationClient

__all__ = [
    "GMRTClientConfig",
    "GMRTElevationClient",
]
