"""Formatting helpers for reports."""

_UNITS = ("B", "KiB", "MiB", "GiB", "TiB")


def human_bytes(n: int) -> str:
    """Format a byte count in binary units.

    Sizes below 1 KiB are shown as whole bytes. Above that the precision
    shrinks as the number grows: two decimals below 10, one below 100,
    none from 100 up.

    Examples:
        human_bytes(999) -> "999 B"
        human_bytes(1024) -> "1.00 KiB"
        human_bytes(10 * 1024 * 1024) -> "10.0 MiB"
    """
    if n < 1024:
        return f"{n} B"

    size = float(n)
    unit = 0
    while size >= 1024.0 and unit < len(_UNITS) - 1:
        size /= 1024.0
        unit += 1

    if size >= 100.0:
        return f"{size:.0f} {_UNITS[unit]}"
    if size >= 10.0:
        return f"{size:.1f} {_UNITS[unit]}"
    return f"{size:.2f} {_UNITS[unit]}"
