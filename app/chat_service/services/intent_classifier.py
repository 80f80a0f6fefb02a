"""
Keyword intent detection.

Deterministic only; the shopping flow needs a cheap check that runs
before the model call.
"""

ORDER_KEYWORDS = ("order", "buy", "purchase")


def has_order_intent(text: str) -> bool:
    """
    True when the text mentions ordering, buying or purchasing.

    Case-insensitive substring match, so "Buying" and "reorder" count.
    """
    lowered = text.lower()
    return any(keyword in lowered for keyword in ORDER_KEYWORDS)
