"""
S7 transport layer.

This package provides the transport the client talks to:
- S7Transport: protocol every transport implements (transport.py)
- ItemResult, CpuInfo: transport result types (transport.py)
- Snap7Transport: implementation on top of python-snap7 (snap7_transport.py)

Snap7Transport is not imported here so the client can be used with another
transport without loading the Snap7 library; import it from
s7link.layers.snap7_transport.
"""

from .transport import CpuInfo, ItemResult, S7Transport

__all__ = [
    "CpuInfo",
    "ItemResult",
    "S7Transport",
]
