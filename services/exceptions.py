"""
Domain exceptions for RiskCast services
"""


class RiskCastError(Exception):
    """Base class for all service errors"""


class FileValidationError(RiskCastError):
    """Upload rejected before any parsing was attempted"""

    def __init__(self, message: str, too_large: bool = False):
        super().__init__(message)
        self.too_large = too_large


class ParseError(RiskCastError):
    """Raw file content could not be turned into a dataset"""


class InsufficientDataError(RiskCastError):
    """Too few location-filtered records to run the dataset analysis"""

    def __init__(self, available: int, required: int):
        super().__init__(
            f"Only {available} matching records available; at least {required} required"
        )
        self.available = available
        self.required = required


class DatasetNotFoundError(RiskCastError):
    """No stored dataset with the requested id"""

    def __init__(self, dataset_id: str):
        super().__init__(f"Dataset not found: {dataset_id}")
        self.dataset_id = dataset_id


class UnknownLocationError(RiskCastError):
    """Location has no static profile for the rule-table path"""

    def __init__(self, location: str):
        super().__init__(f"Unknown location: {location}")
        self.location = location
