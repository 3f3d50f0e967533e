"""Object key generation: images/YYYY/MM/DD/<random><ext>."""
from __future__ import annotations

import os
import random
import string
from datetime import datetime
from typing import Callable, Optional

KEY_PREFIX = "images"
SUFFIX_LENGTH = 16
LETTERS = string.ascii_lowercase + string.ascii_uppercase + string.digits


def file_extension(path: str) -> str:
    """Suffix from the last dot of the final path element, dot included.

    Dotfiles count: "/x/.hidden" gives ".hidden". A path ending in a
    separator has no extension.
    """
    name = os.path.basename(path)
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


class KeyGenerator:
    """Builds randomized, date-partitioned keys for uploaded objects.

    A single instance is meant to live for the whole run so that its
    generator is seeded once. Keys are not guaranteed unique; the 62**16
    suffix space makes collisions unlikely, nothing more.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now

    def random_string(self, n: int) -> str:
        return "".join(self.rng.choice(LETTERS) for _ in range(n))

    def generate_key(self, ext: str) -> str:
        date = self.clock().strftime("%Y/%m/%d")
        return f"{KEY_PREFIX}/{date}/{self.random_string(SUFFIX_LENGTH)}{ext}"
