"""Library brand table configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from NeosCatalog.config.common import (
    expect_mapping,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)
from NeosCatalog.core.errors import ConfigurationError
from NeosCatalog.core.models import LibraryBrand

DEFAULT_BRAND_ID = "neos"
UNKNOWN_BRAND_POLICIES = ("error", "default")


@dataclass(frozen=True, slots=True)
class LibrariesConfig:
    """Store the brand table and lookup policy.

    Attributes:
        default_brand: Key used when a request carries no brand hint.
        on_unknown: ``error`` surfaces NotFoundError for an unknown hint,
            ``default`` falls back to the default brand.
        brands: brand_id -> LibraryBrand.
    """

    default_brand: str
    on_unknown: str
    brands: Mapping[str, LibraryBrand] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "brands", MappingProxyType(dict(self.brands)))


def load_libraries(raw: Mapping[str, Any]) -> LibrariesConfig:
    """Load libraries domain config from raw mapping.

    Each table entry uses the keys ``name``, ``url`` and ``neosurl``.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed libraries configuration.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "libraries", required=True)
    table = expect_mapping(get_required_value(section, "table", "libraries.table"), "libraries.table")

    brands: dict[str, LibraryBrand] = {}
    for brand_id, entry in table.items():
        key = f"libraries.table.{brand_id}"
        brand_id = expect_str(brand_id, f"{key} id")
        entry = expect_mapping(entry, key)
        brands[brand_id] = LibraryBrand(
            brand_id=brand_id,
            name=expect_str(get_required_value(entry, "name", f"{key}.name"), f"{key}.name"),
            home_url=expect_str(get_required_value(entry, "url", f"{key}.url"), f"{key}.url"),
            secondary_portal_url=expect_str(
                get_required_value(entry, "neosurl", f"{key}.neosurl"),
                f"{key}.neosurl",
            ),
        )

    return LibrariesConfig(
        default_brand=expect_str(
            get_optional_value(section, "default", DEFAULT_BRAND_ID),
            "libraries.default",
        ),
        on_unknown=expect_str(get_optional_value(section, "on_unknown", "error"), "libraries.on_unknown"),
        brands=brands,
    )


def check_libraries(config: LibrariesConfig) -> None:
    """Validate libraries domain constraints.

    Raises:
        ConfigurationError: If the default brand is missing from the table or
            the unknown-hint policy is invalid.
    """
    if config.default_brand not in config.brands:
        raise ConfigurationError(f"libraries.table must contain the default brand: {config.default_brand}")
    if config.on_unknown not in UNKNOWN_BRAND_POLICIES:
        raise ConfigurationError(f"libraries.on_unknown must be one of {list(UNKNOWN_BRAND_POLICIES)}")
