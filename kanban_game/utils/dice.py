# ABOUTME: Six-sided die rolling and the injectable random source shared by dice and blocker placement.
# ABOUTME: A seeded random.Random makes whole game scenarios reproducible under test.

import random

DIE_FACES = 6


def create_random_source(seed: int | None = None) -> random.Random:
    """
    Create the random source a game engine draws from.

    Args:
        seed: Optional seed; None gives an unseeded (OS-entropy) source

    Returns:
        A dedicated random.Random instance (never the module-level one)
    """
    return random.Random(seed)


def roll_d6(rng: random.Random | None = None) -> int:
    """
    Roll a single d6.

    Args:
        rng: Random source to draw from (a fresh unseeded one if omitted)

    Returns:
        Integer between 1 and 6 (inclusive)
    """
    source = rng if rng is not None else random.Random()
    return source.randint(1, DIE_FACES)


def validate_die_value(value: int) -> int:
    """
    Check that a capacity value is something a d6 could have left over.

    Args:
        value: Remaining die capacity

    Returns:
        The value unchanged

    Raises:
        ValueError: If value is outside 1-6
    """
    if not 1 <= value <= DIE_FACES:
        raise ValueError(
            f"Die value must be 1-{DIE_FACES}, got {value}"
        )
    return value
