'''
    Unit handling for map coordinates.

    Chado featureloc only holds integers, so QTL begin/end
    on a linkage group are stored as centimorgans x 100.
'''
from decimal import Decimal, ROUND_HALF_UP

# stored integer units per centimorgan
CENTIMORGAN_STORAGE_SCALE = 100


def centimorgans_from_stored(raw, scale=CENTIMORGAN_STORAGE_SCALE):
    """
    2550 -> 25.5
    :param raw: int (or numeric str) as read from featureloc.fmin/fmax
    :param scale: stored units per cM
    :return: float cM, or None for None
    """
    if raw is None:
        return None
    if scale <= 0:
        raise ValueError("centimorgan storage scale must be positive")
    return float(Decimal(str(raw)) / Decimal(scale))


def round_half_up(value, places=2):
    """
    2.345 -> 2.35, where round() gives 2.34 or 2.35 depending on the float
    """
    if value is None:
        return None
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
