# /hostspec/adapters/system/random_source.py
from __future__ import annotations

import random


def make_random_source(seed: int | None = None) -> random.Random:
    """Non-cryptographic generator for the /8 sampler; ``None`` seeds from the OS."""
    return random.Random(seed)
