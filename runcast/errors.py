"""Exceptions raised by the data-retrieval layer.

The interpretation engine itself never raises for data content; these
signal that upstream data could not be fetched at all.
"""


class DataRetrievalError(RuntimeError):
    """Upstream data could not be retrieved or decoded."""


class ForecastUnavailableError(DataRetrievalError):
    """The forecast provider failed to return a usable payload."""


class GeocodingUnavailableError(DataRetrievalError):
    """The geocoding provider failed to return a usable payload."""
