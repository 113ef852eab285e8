"""Scheduled job endpoints.

Registered without user auth; callers present the shared CRON_SECRET as a
Bearer token. Each job returns a partial-success summary.
"""

from fastapi import APIRouter, Depends, HTTPException

from academy.core.auth_middleware import verify_cron_secret
from academy.core.logging import get_logger
from academy.core.schemas_mastery import MasterySweepSummary
from academy.core.schemas_recognitions import RecognitionSweepSummary
from academy.services.mastery_sweep import run_mastery_sweep
from academy.services.recognition_sweep import run_recognition_sweep

logger = get_logger(__name__)

router = APIRouter(prefix="/cron", dependencies=[Depends(verify_cron_secret)])


@router.get("/mastery-update", response_model=MasterySweepSummary)
async def mastery_update() -> MasterySweepSummary:
    """Level up every participant whose counters passed a threshold."""
    try:
        return run_mastery_sweep()
    except Exception as e:
        logger.exception("Mastery update cron failed")
        raise HTTPException(status_code=500, detail="Failed to run mastery update") from e


@router.get("/recognitions", response_model=RecognitionSweepSummary)
async def recognitions() -> RecognitionSweepSummary:
    """Award recognitions for the current submission window."""
    try:
        return run_recognition_sweep()
    except Exception as e:
        logger.exception("Recognition cron failed")
        raise HTTPException(status_code=500, detail="Failed to run recognition awards") from e
