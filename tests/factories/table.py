"""
Factories tables et serveurs.
"""
from factory import Faker, Sequence

from restopos.models.table import RestaurantTable, TableStatus, Waiter
from tests.factories.base import SessionFactory


class RestaurantTableFactory(SessionFactory):

    class Meta:
        model = RestaurantTable

    number = Sequence(lambda n: n + 1)
    capacity = 4
    status = TableStatus.AVAILABLE


class WaiterFactory(SessionFactory):

    class Meta:
        model = Waiter

    name = Faker("first_name")
    is_active = True
