"""Domain-specific exceptions for the forecasting engine.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from ForecastAPIError for easy catching.
"""


class ForecastAPIError(Exception):
    """Base exception for all forecasting engine errors.

    Users can catch this exception to handle any error raised by the engine
    itself. Failures from an external store are not wrapped and propagate
    unchanged.
    """

    pass


class ConfigError(ForecastAPIError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid default values are provided (e.g. ensemble weights)
    - Custom method parameters are malformed (e.g. weights of wrong length)
    - A request has an end date before its start date
    """

    pass


class DataQualityError(ForecastAPIError):
    """Raised when an input series or frame fails validation.

    This exception is raised when:
    - A series contains negative values or duplicate months
    - Required columns are missing from a source DataFrame
    """

    pass


class EmptySeriesError(DataQualityError):
    """Raised when a forecast is requested over a series with no points."""

    pass


class UnsupportedMethodError(ForecastAPIError):
    """Raised when a forecast method is not one of the supported methods."""

    pass


class ForecastNotFoundError(ForecastAPIError):
    """Raised when a stored forecast cannot be found for a tenant."""

    pass


class SourceError(ForecastAPIError):
    """Raised when a historical data source cannot deliver a series.

    This exception is raised when:
    - The HTTP source answers with a non-2xx status
    - The response payload is not the expected list of monthly totals
    """

    pass
