"""Signal types emitted by the classification rules.

Signals form a closed ordered set. ``BUY``/``SELL``/``HOLD`` carry the plain
bullish, bearish and neutral readings; the ``STRONG_*`` members are emitted by
rules that also detect an extending move or an extreme-band warning.
"""

from enum import Enum


class SignalType(Enum):
    """Enumeration of possible signal types."""

    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"

    @property
    def score(self) -> int:
        """Directional score from +2 (strong buy) to -2 (strong sell)."""
        return _SCORES[self]

    @property
    def is_bullish(self) -> bool:
        return self.score > 0

    @property
    def is_bearish(self) -> bool:
        return self.score < 0

    @classmethod
    def from_score(cls, score: int) -> 'SignalType':
        """Return the signal for a directional score, saturating at +/-2."""
        bounded = max(-2, min(2, int(score)))
        return next(signal for signal, value in _SCORES.items() if value == bounded)


_SCORES: dict[SignalType, int] = {
    SignalType.STRONG_BUY: 2,
    SignalType.BUY: 1,
    SignalType.HOLD: 0,
    SignalType.SELL: -1,
    SignalType.STRONG_SELL: -2,
}


# Type aliases for convenience
SignalList = list[SignalType]
