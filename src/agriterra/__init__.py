"""
Agriterra - terrain and suitability analysis for agricultural land parcels.

This package turns a WGS84 polygon into a terrain report (elevation, slope,
aspect, drainage, erosion, solar exposure) and maps it into per-crop
suitability and return-on-investment indicators.
"""

__version__ = "0.1.0"
