"""Rollup of per-tenant payment status into house and portfolio counters"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from domus.domain.models import HouseStats, PortfolioStats
from domus.domain.payment_status import PaymentStatusEngine
from domus.domain.store import EntityStore
from domus.utils.date_utils import round_half_up


def nominal_occupancy_rate(total_tenants: int, total_houses: int, rooms_per_house: int = 4) -> int:
    """
    Legacy occupancy approximation: tenants / (houses * rooms_per_house).

    Assumes a fixed capacity per house instead of counting rooms.
    Returns a percentage rounded half-up and capped at 100; 0 without tenants.
    """
    if total_tenants <= 0 or total_houses <= 0:
        return 0
    rate = round_half_up(total_tenants / (total_houses * rooms_per_house) * 100)
    return min(rate, 100)


def room_occupancy_rate(total_tenants: int, total_rooms: int) -> int:
    """Occupancy against the actual room count, percent capped at 100"""
    if total_tenants <= 0 or total_rooms <= 0:
        return 0
    return min(round_half_up(total_tenants / total_rooms * 100), 100)


class PortfolioAggregator:
    """Computes dashboard counters from the store and the status engine"""

    def __init__(self, store: EntityStore, engine: PaymentStatusEngine | None = None, rooms_per_house: int = 4):
        self.store = store
        self.engine = engine or PaymentStatusEngine(store)
        self.rooms_per_house = rooms_per_house

    def overdue_count_for_house(self, house_id: int, now: datetime | None = None) -> int:
        """Tenants of the house whose current-month status is overdue"""
        tenants = self.store.get_tenants(house_id)
        statuses = self.engine.statuses_for_tenants(tenants, now)
        return sum(1 for status in statuses.values() if status.is_overdue)

    def total_rent_for_house(self, house_id: int) -> Decimal:
        """Rent due across all tenants of the house, regardless of status"""
        return sum((t.rent_amount for t in self.store.get_tenants(house_id)), Decimal("0"))

    def house_stats(self, house_id: int, now: datetime | None = None) -> Optional[HouseStats]:
        """Rollup for one house, None when the house does not exist"""
        house = self.store.get_house(house_id)
        if house is None:
            return None

        tenants = self.store.get_tenants(house.id)
        statuses = self.engine.statuses_for_tenants(tenants, now)

        return HouseStats(
            house=house,
            tenant_count=len(tenants),
            total_rent=sum((t.rent_amount for t in tenants), Decimal("0")),
            overdue_count=sum(1 for status in statuses.values() if status.is_overdue),
        )

    def all_house_stats(self, now: datetime | None = None) -> List[HouseStats]:
        """Rollup for every house; houses deleted mid-computation are skipped"""
        now = now or datetime.now()
        results = []
        for house in self.store.get_houses():
            stats = self.house_stats(house.id, now)
            if stats is not None:
                results.append(stats)
        return results

    def portfolio_stats(self, now: datetime | None = None, houses: List[HouseStats] | None = None) -> PortfolioStats:
        """
        Portfolio totals as the sum of house-level aggregates.

        occupancy_rate keeps the legacy fixed-capacity formula;
        room_occupancy_rate uses the real number of rooms. Pass houses to
        reuse house rollups already computed for the same instant.
        """
        if houses is None:
            houses = self.all_house_stats(now)

        total_houses = len(houses)
        total_tenants = sum(h.tenant_count for h in houses)

        return PortfolioStats(
            total_houses=total_houses,
            total_tenants=total_tenants,
            total_rent=sum((h.total_rent for h in houses), Decimal("0")),
            overdue_count=sum(h.overdue_count for h in houses),
            total_payments=self.store.count_payments(),
            total_collected=self.store.sum_payments(),
            occupancy_rate=nominal_occupancy_rate(total_tenants, total_houses, self.rooms_per_house),
            room_occupancy_rate=room_occupancy_rate(total_tenants, self.store.count_rooms()),
        )
