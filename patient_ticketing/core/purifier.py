import bleach


def purify(value: object) -> str:
    """Strip markup from a raw form value; ``None`` becomes an empty string."""
    if value is None:
        return ""
    return bleach.clean(str(value), tags=set(), attributes={}, strip=True)
