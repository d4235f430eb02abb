from __future__ import annotations

_BINARY_UNITS: list[tuple[float, str]] = [
    (1024.0**5, "PiB"),
    (1024.0**4, "TiB"),
    (1024.0**3, "GiB"),
    (1024.0**2, "MiB"),
    (1024.0, "KiB"),
]

_DECIMAL_UNITS: list[tuple[float, str]] = [
    (1e15, "P"),
    (1e12, "T"),
    (1e9, "G"),
    (1e6, "M"),
    (1e3, "K"),
]


def format_magnitude(value: float, precision: int | None = None, unit_kind: str | None = None) -> str:
    """Human readable label for an axis tick or tooltip value.

    ``unit_kind`` is matched loosely, the way series labels are named in
    reports: anything containing "size" is shown in binary multiples,
    anything containing "duration" in ms/sec, any other label in decimal
    multiples. Without a unit kind the value is only rounded.
    """
    value = float(value)
    if precision is None or (precision == 0 and value != 0):
        precision = 1

    if unit_kind:
        kind = unit_kind.lower()
        if "size" in kind:
            for factor, suffix in _BINARY_UNITS:
                if abs(value) >= factor:
                    return f"{value / factor:.{precision}f} {suffix}"
            return f"{value:.{precision}f} B"
        if "duration" in kind:
            if abs(value) >= 1000:
                return f"{value / 1000:.{precision}f} sec"
            return f"{plain_number(value)} ms"
        for factor, suffix in _DECIMAL_UNITS:
            if abs(value) >= factor:
                return f"{value / factor:.{precision}f} {suffix}"

    return f"{value:.{precision}f}"


def format_number(value: float, decimals: int = 2) -> str:
    rounded = round(abs(float(value)), decimals)
    whole = int(rounded)
    fraction = round((rounded - whole) * 10**decimals)
    text = f"{whole:,}"
    if fraction:
        text += f".{fraction:0{decimals}d}"
    if value < 0 and (whole or fraction):
        return f"-{text}"
    return text


def plain_number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)
