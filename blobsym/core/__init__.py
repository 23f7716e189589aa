"""Blobsym core: data models, parse errors and the extraction engine."""
