"""HTML rendering for release notes emails."""

from __future__ import annotations

from .renderer import DEFAULT_BROWSE_URL, REPORT_CSS, browse_url, format_updated, render_report

__all__ = ["DEFAULT_BROWSE_URL", "REPORT_CSS", "browse_url", "format_updated", "render_report"]
