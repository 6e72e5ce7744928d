"""
MeterHub: telemetry ingestion and query API for DLMS energy meters.
"""

__version__ = "0.1.0"
