"""
Blobsym Shared Module
======================

Configuration, structured logging and console presentation used by the
blobsym extractor and its command line.
"""

from shared.config import BlobsymConfig

__all__ = ["BlobsymConfig"]
