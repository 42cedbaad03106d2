import random

from utils.constants import CATEGORY_COLORS


def random_hsl(rng: random.Random = random) -> str:
    hue = rng.randrange(360)
    saturation = 70 + rng.randrange(30)
    lightness = 50 + rng.randrange(20)
    return f"hsl({hue}, {saturation}%, {lightness}%)"


def pick_color(used: list[str], rng: random.Random = random) -> str:
    """Random palette color not in used; random HSL once the palette runs out."""
    free = [c for c in CATEGORY_COLORS if c.lower() not in {u.lower() for u in used}]
    if free:
        return rng.choice(free)
    return random_hsl(rng)
