"""Exceptions raised by playlistengine."""


class PlaylistEngineError(Exception):
    """Base exception for playlistengine errors"""
    pass


class VectorLengthError(PlaylistEngineError, ValueError):
    """Raised when two feature vectors of different length are compared"""
    pass


class UnknownStrategyError(PlaylistEngineError, ValueError):
    """Raised for an unknown strategy preset or strategy type"""
    pass


class PoolFormatError(PlaylistEngineError, ValueError):
    """Raised when a track pool is missing required fields"""
    pass
