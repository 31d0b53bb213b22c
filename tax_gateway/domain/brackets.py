"""Progressive bracket table and tax computation"""

import math
from typing import Iterable, Iterator, Tuple

from tax_gateway.domain.models import Bracket
from tax_gateway.utils.rounding import round2


class BracketTable:
    """
    Ordered, immutable sequence of progressive tax bands.

    Each band taxes the next `upper_width` naira of income at its rate. The
    last band must be unbounded so every income is fully consumed.
    """

    def __init__(self, brackets: Iterable[Bracket]):
        self._brackets: Tuple[Bracket, ...] = tuple(brackets)
        self._validate()

    def _validate(self) -> None:
        if not self._brackets:
            raise ValueError("Bracket table needs at least one band")

        for index, bracket in enumerate(self._brackets):
            if not 0.0 <= bracket.rate <= 1.0:
                raise ValueError(f"Band {index} rate {bracket.rate} outside [0, 1]")
            if bracket.upper_width <= 0:
                raise ValueError(f"Band {index} width must be positive")
            if bracket.unbounded and index != len(self._brackets) - 1:
                raise ValueError("Only the last band may be unbounded")

        if not self._brackets[-1].unbounded:
            raise ValueError("Last band must be unbounded")

    def __iter__(self) -> Iterator[Bracket]:
        return iter(self._brackets)

    def __len__(self) -> int:
        return len(self._brackets)

    def boundaries(self) -> Tuple[float, ...]:
        """Cumulative income thresholds where each bounded band ends"""
        total = 0.0
        edges = []
        for bracket in self._brackets[:-1]:
            total += bracket.upper_width
            edges.append(total)
        return tuple(edges)


# Nigeria 2026 PAYE bands (naira)
NIGERIA_2026_BRACKETS = BracketTable(
    [
        Bracket(upper_width=800_000, rate=0.0),
        Bracket(upper_width=2_200_000, rate=0.15),
        Bracket(upper_width=9_000_000, rate=0.18),
        Bracket(upper_width=13_000_000, rate=0.21),
        Bracket(upper_width=25_000_000, rate=0.23),
        Bracket(upper_width=math.inf, rate=0.25),
    ]
)


def compute_tax(taxable_income: float, brackets: BracketTable = NIGERIA_2026_BRACKETS) -> float:
    """
    Apply marginal rates band by band and return tax owed rounded to the cent.

    Income that lands exactly on a band boundary is taxed entirely in the
    lower band.

    Example:
        6,000,000 taxable → 0 + 2,200,000 * 15% + 3,000,000 * 18% = 870,000
    """
    remaining = taxable_income
    tax = 0.0

    for bracket in brackets:
        if remaining <= 0:
            break
        taxed_amount = min(remaining, bracket.upper_width)
        tax += taxed_amount * bracket.rate
        remaining -= taxed_amount

    return round2(tax)
