"""
Sub category request schemas.
"""

from __future__ import annotations

from core.schemas import NamedPayload, RowId


class SubCategoryPayload(NamedPayload):
    category_id: RowId
