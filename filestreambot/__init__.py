"""Configuration, link hashing, range streaming and an aiohttp server for Telegram file links."""

__version__ = "3.0.0"