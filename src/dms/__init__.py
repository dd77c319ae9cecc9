"""
dms - Datastream Management Service.

Management API for datastream definitions: declarative records of a
data-movement pipeline (source, connector type, destination, metadata).
"""

__version__ = "0.1.0"
