"""Edge color channel masks."""

from enum import IntFlag


class EdgeColor(IntFlag):
    """Set of color channels an edge contributes to.

    An edge participates in the distance search of every channel present in
    its color. WHITE edges are visible in all three channels.
    """

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
