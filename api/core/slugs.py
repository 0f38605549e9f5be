"""
Random token and slug helpers.
"""

from __future__ import annotations

import secrets
import string
from typing import Awaitable, Callable

SLUG_LENGTH = 8
MAX_SLUG_ATTEMPTS = 20

_ALPHABET = string.ascii_letters + string.digits


class SlugExhaustedError(RuntimeError):
    pass


def random_string(length: int) -> str:
    """
    Cryptographically random alphanumeric string of `length` characters.
    """
    if length <= 0:
        raise ValueError("length must be > 0")
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


async def generate_unique_slug(
    exists: Callable[[str], Awaitable[bool]],
    *,
    length: int = SLUG_LENGTH,
    max_attempts: int = MAX_SLUG_ATTEMPTS,
    make: Callable[[int], str] = random_string,
) -> str:
    """
    Draw random slugs until `exists(slug)` reports one that is free.

    The lookup is injected so this stays independent of any table.
    """
    for _ in range(max_attempts):
        slug = make(length)
        if not await exists(slug):
            return slug
    raise SlugExhaustedError(f"No free slug after {max_attempts} attempts.")
