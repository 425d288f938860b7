"""Low-stock threshold detection."""


def is_low(quantity: int, threshold: int) -> bool:
    """Return True when quantity is strictly below threshold.

    Stateless: a record that stays below its threshold is reported low on
    every evaluation.
    """
    return quantity < threshold
