"""
Per-platform mapping layers

A CSV export can mix bookings from several channels. The ALL mapping is the
base; a platform may override individual fields.
"""

from typing import Dict, Optional

from core.models import FieldMapping
from core.schema import PLATFORMS


BASE_PLATFORM = 'ALL'


class PlatformMappings:
    """
    Base mapping plus per-platform overrides.

    Example:
        layers = PlatformMappings(FieldMapping({'cleaningFee': 'Cleaning'}))
        layers.set_override('vrbo', 'cleaningFee', 'Cleaning Fee (VRBO)')
        layers.for_platform('vrbo').get('cleaningFee')   # 'Cleaning Fee (VRBO)'
    """

    def __init__(self, base: Optional[FieldMapping] = None):
        self.base = base or FieldMapping()
        self.overrides: Dict[str, FieldMapping] = {}

    def set_override(self, platform: str, target_field: str, locator: Optional[str]) -> None:
        if platform == BASE_PLATFORM:
            self.base.set(target_field, locator)
            return
        if platform not in PLATFORMS:
            raise ValueError(f"Unknown platform: {platform}")
        self.overrides.setdefault(platform, FieldMapping()).set(target_field, locator)

    def is_override(self, platform: str, target_field: str) -> bool:
        """True when ``platform`` has its own locator for the field."""
        layer = self.overrides.get(platform)
        return bool(layer and layer.is_mapped(target_field))

    def for_platform(self, platform: str = BASE_PLATFORM) -> FieldMapping:
        """
        Effective mapping for one platform.

        Blank override locators fall back to the base mapping.
        """
        merged = dict(self.base.locators)
        layer = self.overrides.get(platform)
        if layer is not None:
            for field, locator in layer.locators.items():
                if locator and locator.strip():
                    merged[field] = locator
        return FieldMapping(merged)
