"""
Mirror node clients for HTS supply collection.
"""

from .mirror_client import MirrorNodeClient, MockMirrorClient, BaseMirrorClient, MirrorResponse
from .factory import create_mirror_client

__all__ = [
    "MirrorNodeClient",
    "MockMirrorClient",
    "BaseMirrorClient",
    "MirrorResponse",
    "create_mirror_client"
]
