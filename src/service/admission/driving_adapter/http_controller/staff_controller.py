from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.query.check_staff_pin_use_case import CheckStaffPinUseCase
from src.service.admission.driving_adapter.http_controller.schema.admission_schema import (
    StaffPinCheckRequest,
    StaffPinCheckResponse,
)


router = APIRouter()


@router.post('/pin/check')
@Logger.io
async def check_staff_pin(
    request: StaffPinCheckRequest,
    use_case: CheckStaffPinUseCase = Depends(CheckStaffPinUseCase.depends),
) -> StaffPinCheckResponse:
    valid = await use_case.execute(pin=request.pin)
    return StaffPinCheckResponse(valid=valid)
