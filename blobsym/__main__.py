"""
Blobsym Module Entry Point
===========================

Allows running the CLI via: python -m blobsym
"""

from blobsym.cli import main

if __name__ == "__main__":
    main()
