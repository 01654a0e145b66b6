from fastapi import APIRouter, Depends, Path, Query, status
from typing import List
from sqlalchemy.orm import Session
import logging

from src import schemas, exceptions
from src.database import get_session
from src.exceptions import APIError, ReferralCodeNotFoundError, ReferralCodeAlreadyExistsError
from src.services.referral_code_service import referral_code_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/referral-codes", tags=["Referral Codes"])


def business_error_to_api_error(e: exceptions.BusinessError) -> APIError:
    if isinstance(e, ReferralCodeNotFoundError):
        return APIError(code=e.code, message=e.message, status_code=404, details=e.details)
    if isinstance(e, ReferralCodeAlreadyExistsError):
        return APIError(code=e.code, message=e.message, status_code=409, details=e.details)
    return APIError(code=e.code, message=e.message, status_code=400, details=e.details)


@router.post("", response_model=schemas.ReferralCode, status_code=status.HTTP_201_CREATED)
async def create_referral_code(request: schemas.ReferralCodeRequest, db: Session = Depends(get_session)):
    try:
        return referral_code_service.create(db, request)
    except ReferralCodeAlreadyExistsError as e:
        raise business_error_to_api_error(e)


@router.get("", response_model=List[schemas.ReferralCode])
async def get_all_referral_codes(db: Session = Depends(get_session)):
    return referral_code_service.list_all(db)


@router.get("/active", response_model=List[schemas.ReferralCode])
async def get_active_referral_codes(db: Session = Depends(get_session)):
    return referral_code_service.list_active(db)


@router.get("/top", response_model=List[schemas.ReferralCode])
async def get_top_referral_codes(db: Session = Depends(get_session)):
    """
    Топ кодов по количеству использований (размер топа - TOP_REFERRAL_CODES_LIMIT)
    """
    return referral_code_service.top_by_usage(db)


@router.get("/statistics", response_model=schemas.ReferralCodeStatistics)
async def get_referral_codes_statistics(db: Session = Depends(get_session)):
    return referral_code_service.get_statistics(db)


@router.get("/total-usage", response_model=schemas.TotalUsageResponse)
async def get_total_usage_count(db: Session = Depends(get_session)):
    return schemas.TotalUsageResponse(total_usage=referral_code_service.total_usage_count(db))


@router.get("/search/owner", response_model=List[schemas.ReferralCode])
async def search_referral_codes_by_owner(
    owner_name: str = Query(..., alias="ownerName", min_length=1),
    db: Session = Depends(get_session)
):
    return referral_code_service.search_by_owner_name(db, owner_name)


@router.get("/usage/{min_usage}", response_model=List[schemas.ReferralCode])
async def get_referral_codes_with_min_usage(
    min_usage: int = Path(..., ge=0),
    db: Session = Depends(get_session)
):
    return referral_code_service.with_min_usage(db, min_usage)


@router.get("/validate/{code}", response_model=schemas.ReferralCodeValidationResponse)
async def validate_referral_code(code: str, db: Session = Depends(get_session)):
    return schemas.ReferralCodeValidationResponse(code=code, valid=referral_code_service.is_valid(db, code))


@router.get("/code/{code}", response_model=schemas.ReferralCode)
async def get_referral_code_by_code(code: str, db: Session = Depends(get_session)):
    try:
        return referral_code_service.get_by_code(db, code)
    except ReferralCodeNotFoundError as e:
        raise business_error_to_api_error(e)


@router.post("/code/{code}/use", response_model=schemas.MessageResponse)
async def use_referral_code(code: str, db: Session = Depends(get_session)):
    """
    Засчитывает одно использование кода. Для неизвестного кода ничего не происходит
    """
    referral_code_service.increment_usage(db, code)
    return schemas.MessageResponse(message="Referral code usage recorded")


@router.post("/initialize", response_model=schemas.ReferralCodesInitializeResponse)
async def initialize_default_referral_codes(db: Session = Depends(get_session)):
    created = referral_code_service.seed_defaults(db)
    return schemas.ReferralCodesInitializeResponse(
        message="Default referral codes initialized successfully",
        created=created
    )


@router.get("/{referral_code_id}", response_model=schemas.ReferralCode)
async def get_referral_code(referral_code_id: int, db: Session = Depends(get_session)):
    try:
        return referral_code_service.get_by_id(db, referral_code_id)
    except ReferralCodeNotFoundError as e:
        raise business_error_to_api_error(e)


@router.put("/{referral_code_id}", response_model=schemas.ReferralCode)
async def update_referral_code(
    referral_code_id: int,
    request: schemas.ReferralCodeRequest,
    db: Session = Depends(get_session)
):
    try:
        return referral_code_service.update(db, referral_code_id, request)
    except (ReferralCodeNotFoundError, ReferralCodeAlreadyExistsError) as e:
        raise business_error_to_api_error(e)


@router.delete("/{referral_code_id}", response_model=schemas.MessageResponse)
async def delete_referral_code(referral_code_id: int, db: Session = Depends(get_session)):
    try:
        referral_code_service.delete(db, referral_code_id)
    except ReferralCodeNotFoundError as e:
        raise business_error_to_api_error(e)
    return schemas.MessageResponse(message="Referral code deleted successfully")


@router.put("/{referral_code_id}/activate", response_model=schemas.ReferralCode)
async def activate_referral_code(referral_code_id: int, db: Session = Depends(get_session)):
    try:
        return referral_code_service.activate(db, referral_code_id)
    except ReferralCodeNotFoundError as e:
        raise business_error_to_api_error(e)


@router.put("/{referral_code_id}/deactivate", response_model=schemas.ReferralCode)
async def deactivate_referral_code(referral_code_id: int, db: Session = Depends(get_session)):
    try:
        return referral_code_service.deactivate(db, referral_code_id)
    except ReferralCodeNotFoundError as e:
        raise business_error_to_api_error(e)
