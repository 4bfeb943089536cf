"""
Conversione di importi ricorrenti in equivalenti mensili/annuali.
"""

from core.models import Frequency


def monthly_equivalent(amount: float, frequency: Frequency) -> float:
    """
    Importo mensile equivalente di un costo ricorrente.
    I costi una tantum valgono 0: non vengono spalmati sui mesi.
    """
    frequency = Frequency(frequency)
    if frequency == Frequency.MONTHLY:
        return amount
    if frequency == Frequency.QUARTERLY:
        return amount / 3
    if frequency == Frequency.YEARLY:
        return amount / 12
    if frequency == Frequency.ONE_TIME:
        return 0.0
    raise ValueError(f"Frequenza non gestita: {frequency}")


def yearly_equivalent(amount: float, frequency: Frequency) -> float:
    """Importo annuale equivalente, per le statistiche. Una tantum: contato una volta."""
    frequency = Frequency(frequency)
    if frequency == Frequency.MONTHLY:
        return amount * 12
    if frequency == Frequency.QUARTERLY:
        return amount * 4
    if frequency in (Frequency.YEARLY, Frequency.ONE_TIME):
        return amount
    raise ValueError(f"Frequenza non gestita: {frequency}")
