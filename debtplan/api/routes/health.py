from fastapi import APIRouter

from debtplan.config import settings
from debtplan.simulation.interest import PAID_OFF_EPSILON

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "engine": {
            "max_months": settings.MAX_MONTHS,
            "paid_off_epsilon": PAID_OFF_EPSILON,
            "autopilot_priority": settings.AUTOPILOT_PRIORITY,
        },
    }
