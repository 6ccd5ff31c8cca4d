from __future__ import annotations

from companies_api.models.company import Company

__all__ = ["Company"]
