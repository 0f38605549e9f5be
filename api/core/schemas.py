"""
Request schemas and field types shared by all catalog resources.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, StringConstraints

# Postgres BIGINT upper bound; larger ids cannot match a row.
BIGINT_MAX = 2**63 - 1

Status = Literal["active", "inactive"]

# Surrounding whitespace is dropped before the length check, so "   " is empty.
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

RowId = Annotated[int, Field(ge=1, le=BIGINT_MAX)]


class NamedPayload(BaseModel):
    name: Name
    status: Status


class BulkDeleteRequest(BaseModel):
    slugs: list[str] = Field(..., min_length=1)
