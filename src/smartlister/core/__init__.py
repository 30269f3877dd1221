"""Core functionality for listing generation.

This module provides the building blocks shared by the API and the UI:

- **SmartListerConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)
- **images**: Downscaling, compression and data URI helpers (Pillow)
- **GeminiListingModel**: Lazy wrapper around the Gemini client
- **LicenseStore**: SQLite-backed license key lookup for the access gate

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - All settings prefixed with SMARTLISTER_ in .env files

2. **Generation Backend** (listing_model.py):
   - One client per process, created on first use
   - Structured JSON output requested from the model

3. **Support Utilities**:
   - images.py: Encoded image payloads bounded in size and dimension
   - license_store.py: License key records with an active flag and expiry
"""

from smartlister.core.config import SmartListerConfig, config
from smartlister.core.images import ImageProcessingError, compress_image
from smartlister.core.license_store import LicenseRecord, LicenseStore, LicenseStoreError
from smartlister.core.listing_model import GeminiListingModel, ListingModelError

__all__ = [
    "SmartListerConfig",
    "config",
    "ImageProcessingError",
    "compress_image",
    "LicenseRecord",
    "LicenseStore",
    "LicenseStoreError",
    "GeminiListingModel",
    "ListingModelError",
]
