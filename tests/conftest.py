# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures for entity metadata tests."""

import pytest
from sample_entities import Address

from entity_metadata import (
    ComplexType,
    DataProperty,
    DataType,
    InMemoryMetadataStore,
    set_default_store,
)


@pytest.fixture
def store() -> InMemoryMetadataStore:
    """A fresh, empty metadata store."""
    return InMemoryMetadataStore()


@pytest.fixture
def address_type(store: InMemoryMetadataStore) -> ComplexType:
    """ComplexType for Address, registered in the store."""
    complex_type = ComplexType.for_host_type(Address)
    complex_type.add_data_property(
        DataProperty(name="street", data_type=DataType.STRING, is_nullable=False)
    )
    complex_type.add_data_property(
        DataProperty(name="city", data_type=DataType.STRING, is_nullable=False)
    )
    store.add_complex_type(complex_type)
    return complex_type


@pytest.fixture(autouse=True)
def reset_default_store():
    """Keep the process-wide store from leaking between tests."""
    yield
    set_default_store(None)
