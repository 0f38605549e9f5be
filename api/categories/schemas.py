"""
Category request schemas.
"""

from __future__ import annotations

from core.schemas import NamedPayload


class CategoryPayload(NamedPayload):
    pass
