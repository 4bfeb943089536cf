"""
Arrotondamento degli importi al centesimo.

Metà per eccesso (0,125 → 0,13), come i valori già salvati lato web.
round() di Python arrotonda al pari e lavora sul float binario, quindi
non si usa per gli importi.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    # str() evita di portarsi dietro l'errore di rappresentazione del float
    return value if isinstance(value, Decimal) else Decimal(str(value))


def quantize_cents(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_cents(value) -> float:
    """Importo arrotondato al centesimo, metà per eccesso."""
    return float(quantize_cents(value))
