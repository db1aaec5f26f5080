"""Asyncio HTTP/1.x proxy session primitives: heads, body framing and the downstream side."""

__version__ = "0.1.0"