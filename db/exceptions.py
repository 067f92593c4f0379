"""Exception hierarchy for the transaction aggregation service."""


class AggregationAPIError(Exception):
    """Base exception for all service errors."""


class EntityNotFoundError(AggregationAPIError):
    """Raised when an update or delete targets an id that is not in the store."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID '{entity_id}' not found")


class DuplicateEntityError(AggregationAPIError):
    """Raised when creating an entity whose id is already present."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID '{entity_id}' already exists")


class ConfigurationError(AggregationAPIError):
    """Raised when configuration is invalid."""


class DataSourceError(AggregationAPIError):
    """Raised by a data source while serving a request."""


class DataSourceUnavailableError(DataSourceError):
    """Raised when a data source cannot be reached."""
