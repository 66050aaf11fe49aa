"""Pieces every WIT context builds on.

Error kinds, bearer token handling, markup tags and rendering, paging and
JSON-API document helpers. Nothing in here imports a bounded context.
"""
