from fastapi import APIRouter, Depends

from losstrack.api.deps import get_reason_service
from losstrack.reasons import ReasonService
from losstrack.schemas import ReasonRecord

router = APIRouter(prefix="/reasons", tags=["Reasons"])


@router.get("", response_model=list[ReasonRecord])
def list_reasons(reasons: ReasonService = Depends(get_reason_service)):
    return reasons.get_all_reasons()
