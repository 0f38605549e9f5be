"""
Color API endpoints.
"""

from __future__ import annotations

from fastapi import Depends

from auth import dependencies as auth_dependencies
from core import named

from . import repository

router = named.build_router(
    repository.COLOR,
    "/colors",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)
