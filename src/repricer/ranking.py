"""Position of a sell price on a listing's competitor ladder."""

from .models import CompetitorLadder


def ladder_rank(price: float, ladder: CompetitorLadder) -> int:
    """
    Return the 1-based column position of the first ladder price >= `price`.

    Positions count every slot, filled or not: in [None, 95, None, 105] the
    price 100 ranks 4. A price above every filled slot ranks len(ladder) + 1,
    and a zero-length ladder ranks 0.
    """
    if len(ladder) == 0:
        return 0

    for position, competitor_price in ladder.present():
        if competitor_price >= price:
            return position

    return len(ladder) + 1


def second_rung_price(ladder: CompetitorLadder, decimals: int = 2) -> float | None:
    """
    Return the first filled price at least one unit of `decimals` above the
    lowest one (0.01 by default).

    Equal or near-equal prices from several shops count as one rung.
    """
    lowest = ladder.lowest
    if lowest is None:
        return None

    # Tolerance absorbs float error in the gap itself (5.01 - 5.0 < 0.01)
    step = 10 ** -decimals - 1e-9
    for _, competitor_price in ladder.present():
        if competitor_price - lowest >= step:
            return competitor_price
    return None
