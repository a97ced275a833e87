"""Bar series input for the indicator engine."""

from ta_engine.data.bars import OHLCV_COLUMNS, Bar, BarSeries, InputName, ingest

__all__ = ['OHLCV_COLUMNS', 'Bar', 'BarSeries', 'InputName', 'ingest']
