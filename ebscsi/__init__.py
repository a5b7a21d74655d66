"""CSI messages, cloud interface, volume helpers, in-flight tracking and node mount helpers for block storage volumes."""

__version__ = "1.4.0"

__all__ = ["cloud", "csi", "inflight", "mount", "volumes"]