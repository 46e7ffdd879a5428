def compute_index_factor(index: int, number_of_indices: int) -> float:
    """
    Signed offset of the component `index` from the centre of a row of
    `number_of_indices` equally spaced components.

    Examples: for 3 components the factors are -1, 0, 1; for 2 they are -0.5, 0.5.
    """
    return index - (number_of_indices - 1) / 2.0


def percent_to_fraction(percent: float) -> float:
    """Convert a concentration in percent to a fraction in [0, 1]."""
    return percent / 100.0


def fraction_to_percent(fraction: float) -> float:
    """Convert a concentration fraction in [0, 1] to percent."""
    return fraction * 100.0
