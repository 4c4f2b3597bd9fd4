"""Telegram remote control for a Minecraft server host on EC2."""

__version__ = "0.1.0"
