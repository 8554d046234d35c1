"""DentalDesk - dental clinic administration service."""

__version__ = "0.3.0"
