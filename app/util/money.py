from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

ZERO = Decimal("0")
CENT = Decimal("0.01")
# larger magnitudes are not prices; they would also overflow a float on the way out as JSON
MAX_EXPONENT = 100


def to_decimal(x) -> Decimal:
    """Safe-parse a backend amount. Anything unparsable (None, "", "abc",
    NaN, infinities, booleans, absurd magnitudes) becomes 0 so it can never
    poison a total."""
    if x is None or isinstance(x, bool):
        return ZERO
    if isinstance(x, Decimal):
        d = x
    else:
        # use string to avoid float binary artifacts
        try:
            d = Decimal(str(x).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not d.is_finite() or (d and d.adjusted() > MAX_EXPONENT):
        return ZERO
    return d


def money(x) -> Decimal:
    d = to_decimal(x)
    with localcontext() as ctx:
        # keep every integer digit of a large amount when fixing it to cents
        ctx.prec = max(ctx.prec, d.adjusted() + 3)
        return d.quantize(CENT, rounding=ROUND_HALF_UP)
