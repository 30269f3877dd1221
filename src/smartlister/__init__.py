"""Smart Lister - marketplace listing copy from product photos and keywords."""

__version__ = "0.1.0"

from smartlister.core.config import SmartListerConfig, config

__all__ = [
    "SmartListerConfig",
    "config",
]
