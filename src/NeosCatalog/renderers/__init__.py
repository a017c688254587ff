"""Output renderers for command results."""

from __future__ import annotations

from NeosCatalog.renderers.json import (
    dumps,
    render_config,
    render_detail,
    render_search_page,
)

__all__ = [
    "dumps",
    "render_config",
    "render_detail",
    "render_search_page",
]
