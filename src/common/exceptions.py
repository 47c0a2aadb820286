class ForecastError(Exception):
    """Base exception for all congestion forecasting errors."""
    pass

class DataUnavailable(ForecastError):
    """Raised when no readings or averages exist for a requested window."""
    pass

class ConversionUnavailable(ForecastError):
    """Raised when the secondary calendar search cannot find an equivalent date."""
    pass

class PredictorError(ForecastError):
    """Base class for failures of the external predictor."""
    pass

class PredictorUnreachable(PredictorError):
    """Raised when the predictor service cannot be reached or rejects the request."""
    pass

class PredictorTimeout(PredictorError):
    """Raised when the predictor does not answer within the local timeout."""
    pass

class MalformedPredictorResponse(ForecastError):
    """Raised when predictor output cannot be decoded into 48 slot values."""
    pass

class StorageFailure(ForecastError):
    """Raised when the durable store fails to read or write."""
    pass

class SiteNotFound(ForecastError):
    """Raised when a site identifier is not known to the registry."""
    pass

class InvalidStoredPrediction(ForecastError):
    """Raised when a stored prediction cannot be decoded into 48 values."""
    pass

class ConfigurationError(ForecastError):
    """Raised when configuration is invalid."""
    pass
