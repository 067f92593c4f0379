"""Tests for the exception hierarchy."""
from db.exceptions import (
    AggregationAPIError,
    ConfigurationError,
    DataSourceError,
    DataSourceUnavailableError,
    DuplicateEntityError,
    EntityNotFoundError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_base_is_exception(self) -> None:
        assert isinstance(AggregationAPIError("test"), Exception)

    def test_entity_errors_are_api_errors(self) -> None:
        assert isinstance(EntityNotFoundError("Customer", "C1"), AggregationAPIError)
        assert isinstance(DuplicateEntityError("Customer", "C1"), AggregationAPIError)

    def test_configuration_error_is_api_error(self) -> None:
        assert isinstance(ConfigurationError("test"), AggregationAPIError)

    def test_unavailable_is_data_source_error(self) -> None:
        err = DataSourceUnavailableError("down")
        assert isinstance(err, DataSourceError)
        assert isinstance(err, AggregationAPIError)

    def test_not_found_message(self) -> None:
        err = EntityNotFoundError("Account", "ACC042")
        assert str(err) == "Account with ID 'ACC042' not found"
        assert err.entity == "Account"
        assert err.entity_id == "ACC042"

    def test_duplicate_message(self) -> None:
        assert str(DuplicateEntityError("Transaction", "t1")) == \
            "Transaction with ID 't1' already exists"
