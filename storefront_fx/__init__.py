"""USD->ZMW exchange rate service for the storefront."""

__version__ = "0.1.0"
