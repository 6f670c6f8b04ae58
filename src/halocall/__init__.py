"""HaloCall - customer phone and voice agent provisioning."""

__version__ = "0.1.0"
