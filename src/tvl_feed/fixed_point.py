"""Fixed-point conversions between decimal values and scaled integers.

All arithmetic is done on Decimal digits and Python ints. Never use float here.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

# Upper bound on significant digits shift_and_round works with.
MAX_DIGITS = 1000

# Largest value an on-chain uint256 can hold.
MAX_UINT256 = 2**256 - 1


def _to_decimal(value: str | int | float | Decimal) -> Decimal:
    """Convert a numeric value to a finite Decimal or raise ValueError."""
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return amount


def parse_fixed(value: str | int | Decimal, decimals: int) -> int:
    """Convert a decimal value to an integer scaled by ``10**decimals``.

    The conversion is exact. Trailing fractional zeros are ignored, but any
    other fractional digit beyond ``decimals`` places raises ValueError.

    Example:
        parse_fixed("5000.000000", 18) == 5000 * 10**18
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    amount = _to_decimal(value)
    sign, digits, exponent = amount.as_tuple()
    coefficient = int("".join(map(str, digits)) or "0")

    shift = exponent + decimals
    if shift >= 0:
        scaled = coefficient * 10**shift
    else:
        divisor = 10**-shift
        if coefficient % divisor:
            raise ValueError(
                f"Fractional component of {value!r} exceeds {decimals} decimals"
            )
        scaled = coefficient // divisor

    return -scaled if sign else scaled


def format_fixed(value: int, decimals: int) -> str:
    """Render a fixed-point integer as a decimal string ("5000.0", "0.25")."""
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    whole, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""
    prefix = "-" if value < 0 else ""
    return f"{prefix}{whole}.{fraction_str or '0'}"


def shift_and_round(value: str | int | float | Decimal, shift: int, places: int) -> Decimal:
    """Divide ``value`` by ``10**shift`` and round half-up to ``places`` digits.

    Runs in a local decimal context wide enough to hold every digit of the
    result, so the only rounding is the final half-up step.

    Raises ValueError if ``value`` is not a finite number, or if the result
    would need more than MAX_DIGITS significant digits.
    """
    amount = _to_decimal(value)
    integer_digits = max(amount.adjusted() - shift + 1, 1)
    precision = max(len(amount.as_tuple().digits), integer_digits + places + 1)
    if precision > MAX_DIGITS:
        raise ValueError(f"{value!r} is out of range for {places} decimal places")

    with localcontext() as ctx:
        ctx.prec = precision
        try:
            shifted = amount.scaleb(-shift)
            return shifted.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError(f"Cannot rescale {value!r}") from None
