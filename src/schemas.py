from typing import Any, List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

import logging

logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    # фронт работает с camelCase, внутри snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# апи-схемы роутера referral_codes

class ReferralCodeRequest(CamelModel):
    code: str = Field(..., max_length=100)
    owner_name: str = Field(..., max_length=100)

    @field_validator("code", "owner_name", mode="before")
    def validate_not_blank(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} is required")
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError(f"{info.field_name} must not be blank")
        return v


class ReferralCode(CamelModel):
    id: int
    code: str
    owner_name: str
    is_active: bool
    usage_count: int
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)


class ReferralCodeValidationResponse(CamelModel):
    code: str
    valid: bool


class ReferralCodeStatistics(CamelModel):
    total_codes: int
    active_codes: int
    inactive_codes: int
    total_usage: int


class TotalUsageResponse(CamelModel):
    total_usage: int


class ReferralCodesInitializeResponse(CamelModel):
    message: str
    created: List[str]


class MessageResponse(BaseModel):
    message: str


# бизнес-схемы

class DefaultReferralCode(BaseModel):
    code: str
    owner_name: str


# ошибки

class APIErrorContent(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None

class APIErrorResponse(BaseModel):
    error: APIErrorContent
