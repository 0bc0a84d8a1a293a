# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Unit tests for metadata graph models."""

import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest
from sample_entities import Catalog, Customer, Order, Warehouse

from entity_metadata.errors import MetadataError
from entity_metadata.models import (
    AutoGeneratedKeyType,
    ComplexType,
    DataProperty,
    DataType,
    EntityType,
    NavigationProperty,
    structural_name,
)


class TestDataType:
    """Tests for host type to DataType mapping."""

    @pytest.mark.parametrize(
        "host_type,expected",
        [
            (str, DataType.STRING),
            (int, DataType.INT64),
            (float, DataType.DOUBLE),
            (Decimal, DataType.DECIMAL),
            (bool, DataType.BOOLEAN),
            (datetime, DataType.DATE_TIME),
            (date, DataType.DATE),
            (time, DataType.TIME),
            (timedelta, DataType.TIME_SPAN),
            (uuid.UUID, DataType.GUID),
            (bytes, DataType.BINARY),
        ],
    )
    def test_from_host_type(self, host_type, expected):
        assert DataType.from_host_type(host_type) == expected

    def test_bool_is_not_mapped_as_integer(self):
        """bool subclasses int but must map to Boolean."""
        assert DataType.from_host_type(bool) == DataType.BOOLEAN

    def test_unknown_type_is_undefined(self):
        assert DataType.from_host_type(list) == DataType.UNDEFINED
        assert DataType.from_host_type("not a type") == DataType.UNDEFINED

    def test_default_values(self):
        assert DataType.default_value(DataType.INT64) == 0
        assert DataType.default_value(DataType.STRING) == ""
        assert DataType.default_value(DataType.BOOLEAN) is False
        assert DataType.default_value(DataType.GUID) == uuid.UUID(int=0)
        assert DataType.default_value(DataType.UNDEFINED) is None


class TestEntityType:
    """Tests for EntityType bookkeeping."""

    def test_for_host_type(self):
        entity_type = EntityType.for_host_type(Order)
        assert entity_type.short_name == "Order"
        assert entity_type.namespace == Order.__module__
        assert entity_type.name == structural_name("Order", Order.__module__)
        assert entity_type.host_type is Order
        assert entity_type.is_published is False
        assert entity_type.auto_generated_key_type == AutoGeneratedKeyType.NONE

    def test_add_data_property_sets_parent(self):
        entity_type = EntityType.for_host_type(Order)
        dp = DataProperty(name="id", data_type=DataType.INT64)
        entity_type.add_data_property(dp)

        assert dp.parent_type is entity_type
        assert entity_type.get_data_property("id") is dp
        assert entity_type.get_property("id") is dp

    def test_add_duplicate_data_property_raises(self):
        entity_type = EntityType.for_host_type(Order)
        entity_type.add_data_property(DataProperty(name="id", data_type=DataType.INT64))

        with pytest.raises(MetadataError):
            entity_type.add_data_property(DataProperty(name="id", data_type=DataType.INT64))
        assert len(entity_type.data_properties) == 1

    def test_add_key_flagged_property_joins_key(self):
        entity_type = EntityType.for_host_type(Order)
        dp = DataProperty(name="id", data_type=DataType.INT64, is_part_of_key=True)
        entity_type.add_data_property(dp)

        assert entity_type.key_properties == (dp,)

    def test_add_key_property_is_idempotent(self):
        entity_type = EntityType.for_host_type(Order)
        dp = DataProperty(name="id", data_type=DataType.INT64)
        entity_type.add_data_property(dp)

        assert entity_type.add_key_property(dp) is True
        assert entity_type.add_key_property(dp) is False
        assert entity_type.key_properties == (dp,)

    def test_add_key_property_sets_key_flags(self):
        entity_type = EntityType.for_host_type(Order)
        dp = DataProperty(name="id", data_type=DataType.INT64, is_nullable=True)
        entity_type.add_data_property(dp)

        entity_type.add_key_property(dp)

        assert dp.is_part_of_key is True
        assert dp.is_nullable is False
        for prop in entity_type.data_properties:
            assert prop.is_part_of_key == (prop in entity_type.key_properties)

    def test_add_key_property_rejects_foreign_property(self):
        entity_type = EntityType.for_host_type(Order)
        other = EntityType.for_host_type(Customer)
        foreign = DataProperty(name="id", data_type=DataType.INT64)
        other.add_data_property(foreign)
        unparented = DataProperty(name="total", data_type=DataType.DECIMAL)

        for dp in (foreign, unparented):
            with pytest.raises(MetadataError):
                entity_type.add_key_property(dp)
            assert dp.is_part_of_key is False
        assert entity_type.key_properties == ()

    def test_nested_classes_get_distinct_names(self):
        warehouse_item = EntityType.for_host_type(Warehouse.Item)
        catalog_item = EntityType.for_host_type(Catalog.Item)

        assert warehouse_item.short_name == "Warehouse.Item"
        assert catalog_item.short_name == "Catalog.Item"
        assert warehouse_item.name != catalog_item.name

    def test_navigation_lookup(self):
        entity_type = EntityType.for_host_type(Order)
        np = NavigationProperty(name="customer", entity_type_name="Customer:#x")
        entity_type.add_navigation_property(np)

        assert np.parent_type is entity_type
        assert entity_type.get_navigation_property("customer") is np
        assert entity_type.get_property("customer") is np
        assert entity_type.get_navigation_property("missing") is None

        with pytest.raises(MetadataError):
            entity_type.add_navigation_property(
                NavigationProperty(name="customer", entity_type_name="Customer:#x")
            )

    def test_foreign_key_properties(self):
        entity_type = EntityType.for_host_type(Order)
        fk = DataProperty(name="customer_id", data_type=DataType.INT64, is_foreign_key=True)
        entity_type.add_data_property(DataProperty(name="id", data_type=DataType.INT64))
        entity_type.add_data_property(fk)

        assert entity_type.foreign_key_properties == [fk]

    def test_nodes_compare_by_identity(self):
        assert EntityType.for_host_type(Order) != EntityType.for_host_type(Order)


class TestDataProperty:
    """Tests for DataProperty construction."""

    def test_requires_data_type_or_complex_type(self):
        with pytest.raises(MetadataError):
            DataProperty(name="id")

    def test_rejects_both_data_type_and_complex_type(self):
        complex_type = ComplexType(short_name="Address", namespace="x")
        with pytest.raises(MetadataError):
            DataProperty(name="address", data_type=DataType.STRING, complex_type=complex_type)

    def test_to_dict(self):
        dp = DataProperty(name="id", data_type=DataType.INT64, is_nullable=False, default_value=0)
        result = dp.to_dict()

        assert result["name"] == "id"
        assert result["data_type"] == DataType.INT64
        assert result["is_nullable"] is False
        assert result["default_value"] == "0"
        assert "complex_type_name" not in result
        assert "max_length" not in result


class TestNavigationProperty:
    """Tests for NavigationProperty bookkeeping."""

    def test_foreign_key_names_are_unique(self):
        np = NavigationProperty(name="customer", entity_type_name="Customer:#x")
        assert np.add_foreign_key_name("customer_id") is True
        assert np.add_foreign_key_name("customer_id") is False
        assert np.foreign_key_names == ("customer_id",)

    def test_inv_foreign_key_names_are_unique(self):
        np = NavigationProperty(name="profile", entity_type_name="Profile:#x")
        np.add_inv_foreign_key_name("customer_id")
        np.add_inv_foreign_key_name("customer_id")
        assert np.inv_foreign_key_names == ("customer_id",)

    def test_paired_nodes_repr_and_to_dict(self):
        """Cyclic inverse references must not recurse."""
        a = NavigationProperty(name="customer", entity_type_name="Customer:#x")
        b = NavigationProperty(name="orders", entity_type_name="Order:#x", is_scalar=False)
        a.inverse = b
        b.inverse = a

        assert a.is_paired and b.is_paired
        assert "customer" in repr(a)
        assert a.to_dict()["inverse"] == "orders"
        assert b.to_dict()["inverse"] == "customer"
