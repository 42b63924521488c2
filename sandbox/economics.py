#!/usr/bin/env python3
"""
Supply and demand equilibrium and surplus engine.

Responsibilities
- Find the natural (taxed, quantity-restricted) market equilibrium and the
  efficient equilibrium that accounts for the benefit to outside parties.
- Decompose welfare at the natural equilibrium into consumer, producer,
  government and outside-party surplus, with deadweight loss as the residual
  against the maximum achievable surplus.

Conventions
- Quantity is on the x axis and price on the y axis of both curves.
- `tax` shifts the demand curve down as seen by sellers; `outside` is the
  per-unit benefit to third parties and shifts demand up for the efficient
  allocation. Both may be negative (a subsidy or an external cost).
- `reduction` is the fraction by which the natural quantity is cut back.
- `slide` only moves the graph on screen and never enters the economics.

No positive root means no trade: the equilibrium is reported as (0, 0) and
every surplus component at that quantity is zero. Nothing here divides by a
quantity or a price.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from .constants import DEMAND_COEFFICIENTS, SUPPLY_COEFFICIENTS
from .polynomial import Polynomial


@dataclass(frozen=True)
class Equilibrium:
    quantity: float = 0.0
    price: float = 0.0


@dataclass(frozen=True)
class Surplus:
    consumer: float
    producer: float
    government: float
    outside: float
    loss: float

    @property
    def total(self) -> float:
        return self.consumer + self.producer + self.government + self.outside + self.loss


def smallest_positive_root(polynomial: Polynomial) -> float:
    """Smallest strictly positive real root, or 0.0 when there is none."""
    positive = [x for x in polynomial.solutions() if x > 0.0]
    return min(positive) if positive else 0.0


@dataclass(frozen=True)
class MarketGraph:
    supply: Polynomial = field(default_factory=lambda: Polynomial(*SUPPLY_COEFFICIENTS))
    demand: Polynomial = field(default_factory=lambda: Polynomial(*DEMAND_COEFFICIENTS))
    outside: float = 0.0
    tax: float = 0.0
    reduction: float = 0.0
    slide: float = 0.0

    def natural_equilibrium(self) -> Equilibrium:
        taxed_demand = self.demand - self.tax
        quantity = smallest_positive_root(taxed_demand - self.supply)
        if quantity == 0.0:
            return Equilibrium()
        quantity *= 1.0 - self.reduction
        return Equilibrium(quantity, taxed_demand.y(quantity))

    def optimal_equilibrium(self) -> Equilibrium:
        quantity = smallest_positive_root(self.demand + self.outside - self.supply)
        if quantity == 0.0:
            return Equilibrium()
        return Equilibrium(quantity, self.supply.y(quantity))

    def maximum_surplus(self) -> float:
        """Total surplus at the efficient allocation."""
        optimal = self.optimal_equilibrium()
        return (self.demand + self.outside - self.supply).integral(optimal.quantity)

    def surplus(self) -> Surplus:
        natural = self.natural_equilibrium()
        quantity, price = natural.quantity, natural.price

        consumer = (self.demand - self.tax - price).integral(quantity)
        producer = -(self.supply - price).integral(quantity)
        government = self.tax * quantity
        outside = self.outside * quantity
        loss = self.maximum_surplus() - consumer - producer - government - outside

        return Surplus(
            consumer=consumer,
            producer=producer,
            government=government,
            outside=outside,
            loss=loss,
        )

    def graph_input(self) -> Dict[str, List[float]]:
        """Values the graph renderer needs to shade the regions of the plot."""
        natural = self.natural_equilibrium()
        optimal = self.optimal_equilibrium()
        return {
            "supply": [self.supply.a, self.supply.b, self.supply.c],
            "demand": [self.demand.a, self.demand.b, self.demand.c],
            "outside": [self.outside],
            "tax": [self.tax],
            "reduction": [self.reduction],
            "natural": [natural.quantity, natural.price],
            "optimal": [optimal.quantity, optimal.price],
            "slide": [self.slide],
        }
