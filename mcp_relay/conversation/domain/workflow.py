"""Memorable per-conversation workflow identifiers, e.g. ``gold-panda-x7k2q``."""

import random
import string

_COLORS = (
    "red", "blue", "green", "purple", "orange", "pink",
    "yellow", "cyan", "white", "black", "silver", "gold",
)  # fmt: skip
_ANIMALS = (
    "panda", "tiger", "bear", "lion", "wolf", "eagle",
    "shark", "dragon", "fox", "hawk", "whale", "phoenix",
)  # fmt: skip
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_workflow_id(rng: random.Random | None = None) -> str:
    source = rng if rng is not None else random.Random()
    color = source.choice(_COLORS)
    animal = source.choice(_ANIMALS)
    suffix = "".join(source.choices(_SUFFIX_ALPHABET, k=5))
    return f"{color}-{animal}-{suffix}"
