"""Custom exceptions for linkrank."""


class LinkRankError(Exception):
    """Base exception for linkrank errors."""
    pass


class DegenerateInputError(LinkRankError):
    """Graph, or its node sequence or edge mapping, is absent."""
    pass


class InvalidParameterError(LinkRankError, ValueError):
    """Ranking parameter outside its valid domain."""
    pass


class GraphLoadError(LinkRankError):
    """Error reading or parsing an edge list."""
    pass


class StorageError(LinkRankError):
    """Error persisting or fetching scores."""
    pass


class ConfigurationError(LinkRankError):
    """Error in configuration."""
    pass
