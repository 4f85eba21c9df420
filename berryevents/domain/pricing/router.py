"""Pricing router - price summary for multi-service bookings"""

import logging

from fastapi import APIRouter, HTTPException

from .aggregator import aggregate_payments, find_inconsistent_drafts
from .schemas import AggregatedPayment, AggregateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pricing", tags=["Pricing"])


@router.post("/aggregate", response_model=AggregatedPayment)
async def aggregate(data: AggregateRequest):
    """Combine service drafts into one summary (subtotal, add-ons, discounts, commission)"""
    services = [*data.drafts, data.currentService] if data.currentService is not None else data.drafts

    inconsistent = find_inconsistent_drafts(services)
    if inconsistent:
        logger.warning(f"⚠️ Draft totals disagree with their components: {inconsistent}")
        if data.strict:
            raise HTTPException(
                status_code=422,
                detail={
                    "message": "Draft totals do not match base price + add-ons - discounts",
                    "serviceIds": inconsistent,
                },
            )

    return aggregate_payments(data.drafts, data.currentService)
