"""Library brand resolution.

A brand is resolved once per request into a ``RequestContext`` that is passed
down to rendering. Nothing here keeps per-request state, so one resolver can
serve concurrent requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from NeosCatalog.config.brands import DEFAULT_BRAND_ID, UNKNOWN_BRAND_POLICIES, LibrariesConfig
from NeosCatalog.core.errors import ConfigurationError, NotFoundError
from NeosCatalog.core.models import LibraryBrand
from NeosCatalog.utils.log import log


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Ambient data for rendering one request.

    Attributes:
        brand: Resolved library brand.
        brand_hint: Raw hint as received (``lib`` parameter), may be None.
    """

    brand: LibraryBrand
    brand_hint: Optional[str] = None

    @property
    def library_name(self) -> str:
        return self.brand.name

    @property
    def home_url(self) -> str:
        return self.brand.home_url

    @property
    def portal_url(self) -> str:
        return self.brand.secondary_portal_url


class BrandResolver:
    """Resolve brand hints against a read-only brand table."""

    def __init__(
        self,
        brands: Mapping[str, LibraryBrand],
        *,
        default_brand: str = DEFAULT_BRAND_ID,
        on_unknown: str = "error",
    ) -> None:
        """Initialize the resolver.

        Args:
            brands: brand_id -> LibraryBrand.
            default_brand: Key used when no hint is given.
            on_unknown: Policy applied by ``context_for`` to unknown hints.

        Raises:
            ConfigurationError: If the table lacks the default brand or the
                policy is invalid.
        """
        if default_brand not in brands:
            raise ConfigurationError(f"Brand table must contain the default brand: {default_brand}")
        if on_unknown not in UNKNOWN_BRAND_POLICIES:
            raise ConfigurationError(f"Unknown brand policy: {on_unknown}")
        self._brands = MappingProxyType(dict(brands))
        self._default_brand = default_brand
        self._on_unknown = on_unknown

    @classmethod
    def from_config(cls, config: LibrariesConfig) -> BrandResolver:
        return cls(config.brands, default_brand=config.default_brand, on_unknown=config.on_unknown)

    @property
    def default(self) -> LibraryBrand:
        return self._brands[self._default_brand]

    def resolve(self, brand_hint: str | None) -> LibraryBrand:
        """Return the brand for ``brand_hint``.

        A missing or blank hint selects the default brand.

        Raises:
            NotFoundError: If a non-empty hint is not in the table.
        """
        key = (brand_hint or "").strip()
        if not key:
            return self.default
        brand = self._brands.get(key)
        if brand is None:
            raise NotFoundError(f"Unknown library brand: {key}")
        return brand

    def context_for(self, brand_hint: str | None) -> RequestContext:
        """Build the request context, applying the unknown-hint policy.

        Raises:
            NotFoundError: If the hint is unknown and the policy is ``error``.
        """
        try:
            brand = self.resolve(brand_hint)
        except NotFoundError:
            if self._on_unknown != "default":
                raise
            log.warning("Unknown library brand %r, using default %r", brand_hint, self._default_brand)
            brand = self.default
        return RequestContext(brand=brand, brand_hint=brand_hint)
