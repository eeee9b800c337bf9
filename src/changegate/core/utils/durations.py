def format_seconds(value: float) -> str:
    """Render a seconds value literally: `60`, `1000000`, `2.5`.

    Whole numbers drop the fractional part; never uses exponent notation for them.
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
