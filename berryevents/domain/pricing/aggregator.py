"""
Payment aggregation for multi-service bookings.

Combines the drafts a customer has configured into one price summary before
checkout. The aggregator trusts each draft's ``totalPrice``; use
``find_inconsistent_drafts`` to check those totals against their components.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...config import PLATFORM_COMMISSION_RATE
from .calculations import CENTS, to_decimal
from .schemas import AggregatedPayment, PaymentLineItem, ServiceDraft

logger = logging.getLogger(__name__)


def draft_discounts(draft: ServiceDraft) -> Decimal:
    pricing = draft.pricing
    return (
        to_decimal(pricing.materialsDiscount)
        + to_decimal(pricing.recurringDiscount)
        + to_decimal(pricing.timeDiscount)
    )


def expected_total(draft: ServiceDraft) -> Decimal:
    """basePrice + addOnsPrice - discounts"""
    pricing = draft.pricing
    return to_decimal(pricing.basePrice) + to_decimal(pricing.addOnsPrice) - draft_discounts(draft)


def find_inconsistent_drafts(drafts: list[ServiceDraft]) -> list[str]:
    """Service ids whose totalPrice differs from its components by more than a cent"""
    return [
        d.serviceId
        for d in drafts
        if abs(to_decimal(d.pricing.totalPrice) - expected_total(d)) >= CENTS
    ]


def _money(value: Decimal) -> float:
    return float(value.quantize(CENTS, rounding=ROUND_HALF_UP))


def aggregate_payments(
    drafts: list[ServiceDraft], current_service: Optional[ServiceDraft] = None
) -> AggregatedPayment:
    """
    Build the price summary for a set of service drafts.

    Args:
        drafts: Services already configured
        current_service: The service being edited, appended last when given

    Returns:
        AggregatedPayment with per-service line items; commission is the
        platform rate applied to the grand total, rounded half-up to whole units.
    """
    services = [*drafts, current_service] if current_service is not None else list(drafts)

    subtotal = Decimal("0")
    total_add_ons = Decimal("0")
    total_discounts = Decimal("0")
    grand_total = Decimal("0")
    line_items = []

    for service in services:
        base = to_decimal(service.pricing.basePrice)
        add_ons = to_decimal(service.pricing.addOnsPrice)
        discounts = draft_discounts(service)
        total = to_decimal(service.pricing.totalPrice)

        subtotal += base
        total_add_ons += add_ons
        total_discounts += discounts
        grand_total += total

        line_items.append(
            PaymentLineItem(
                serviceId=service.serviceId,
                serviceName=service.serviceName,
                basePrice=_money(base),
                addOns=_money(add_ons),
                discounts=_money(discounts),
                total=_money(total),
            )
        )

    commission = int((grand_total * PLATFORM_COMMISSION_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    logger.debug(f"🧮 Aggregated {len(services)} services: grand total {grand_total}, commission {commission}")

    return AggregatedPayment(
        services=services,
        subtotal=_money(subtotal),
        totalAddOns=_money(total_add_ons),
        totalDiscounts=_money(total_discounts),
        grandTotal=_money(grand_total),
        commission=commission,
        lineItems=line_items,
    )
