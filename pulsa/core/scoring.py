def compute_percentage(part: int, whole: int) -> int:
    """
    Integer percentage of `part` over `whole`, rounded half up (2/3 -> 67, 1/8 -> 13).
    Returns 0 when `whole` is 0.
    """
    if whole <= 0:
        return 0
    # Integer arithmetic avoids float error and Python's round-half-to-even
    return (200 * part + whole) // (2 * whole)
