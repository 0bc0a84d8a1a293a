# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Entity classes used across the test suite."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from entity_metadata import ComplexObject, Entity, NavigationSet


class Address(ComplexObject):
    street: str
    city: str


class Customer(Entity):
    id: int
    name: str
    nickname: Optional[str]
    address: Address
    orders: NavigationSet["Order"]
    recent_orders: NavigationSet["Order"]
    profile: Optional["CustomerProfile"]


class CustomerProfile(Entity):
    id: int
    customer_id: int
    customer: Customer
    bio: str


class Order(Entity):
    id: int
    customer_id: int
    customer: Customer
    total: Decimal
    placed_at: datetime
    shipped_at: Optional[datetime]
    line_items: NavigationSet["OrderLine"]
    tags: list


class OrderLine(Entity):
    id: int
    order_id: int
    order: Optional[Order]
    quantity: int


class Employee(Entity):
    id: int
    manager_id: Optional[int]
    manager: Optional["Employee"]
    reports: NavigationSet["Employee"]


class NotAnEntity:
    id: int


class Warehouse:
    class Item(Entity):
        id: int
        sku: str


class Catalog:
    class Item(Entity):
        id: int
        title: str
