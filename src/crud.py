from typing import List, Optional
from sqlalchemy import select, delete, func, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src import models, utils_base

import logging

logger = logging.getLogger(__name__)


# referral codes - хранилище реферальных кодов

def insert_referral_code(session: Session, referral_code: models.ReferralCode) -> models.ReferralCode:
    """
    Сохранение нового реферального кода, id назначает база.
    При нарушении уникальности откатываем сессию и пробрасываем IntegrityError дальше
    """
    session.add(referral_code)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    session.refresh(referral_code)
    return referral_code


def save_referral_code(session: Session, referral_code: models.ReferralCode) -> models.ReferralCode:
    """
    Сохранение изменений существующего реферального кода
    """
    session.add(referral_code)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    session.refresh(referral_code)
    return referral_code


def get_all_referral_codes(session: Session) -> List[models.ReferralCode]:
    stmt = select(models.ReferralCode).order_by(models.ReferralCode.id)
    return list(session.execute(stmt).scalars().all())


def get_active_referral_codes(session: Session) -> List[models.ReferralCode]:
    stmt = select(models.ReferralCode).where(
        models.ReferralCode.is_active == True
    ).order_by(models.ReferralCode.id)
    return list(session.execute(stmt).scalars().all())


def get_referral_code_by_id(session: Session, referral_code_id: int) -> Optional[models.ReferralCode]:
    stmt = select(models.ReferralCode).where(models.ReferralCode.id == referral_code_id)
    return session.execute(stmt).scalar_one_or_none()


def get_referral_code_by_code(session: Session, code: str) -> Optional[models.ReferralCode]:
    stmt = select(models.ReferralCode).where(models.ReferralCode.code == code)
    return session.execute(stmt).scalar_one_or_none()


def get_active_referral_code_by_code(session: Session, code: str) -> Optional[models.ReferralCode]:
    stmt = select(models.ReferralCode).where(
        models.ReferralCode.code == code,
        models.ReferralCode.is_active == True
    )
    return session.execute(stmt).scalar_one_or_none()


def referral_code_exists_by_code(session: Session, code: str) -> bool:
    stmt = select(models.ReferralCode.id).where(models.ReferralCode.code == code).limit(1)
    return session.execute(stmt).first() is not None


def referral_code_exists_by_id(session: Session, referral_code_id: int) -> bool:
    stmt = select(models.ReferralCode.id).where(models.ReferralCode.id == referral_code_id).limit(1)
    return session.execute(stmt).first() is not None


def delete_referral_code_by_id(session: Session, referral_code_id: int) -> None:
    session.execute(delete(models.ReferralCode).where(models.ReferralCode.id == referral_code_id))
    session.commit()


def search_referral_codes_by_owner_name(session: Session, owner_name: str) -> List[models.ReferralCode]:
    """
    Поиск по подстроке в имени владельца без учета регистра
    """
    pattern = f"%{utils_base.escape_like(owner_name)}%"
    stmt = select(models.ReferralCode).where(
        models.ReferralCode.owner_name.ilike(pattern, escape="\\")
    ).order_by(models.ReferralCode.id)
    return list(session.execute(stmt).scalars().all())


def get_top_referral_codes(session: Session, limit: int) -> List[models.ReferralCode]:
    """
    Топ кодов по количеству использований, при равенстве - по id
    """
    stmt = select(models.ReferralCode).order_by(
        desc(models.ReferralCode.usage_count),
        models.ReferralCode.id
    ).limit(limit)
    return list(session.execute(stmt).scalars().all())


def get_referral_codes_by_min_usage(session: Session, min_usage: int) -> List[models.ReferralCode]:
    stmt = select(models.ReferralCode).where(
        models.ReferralCode.usage_count >= min_usage
    ).order_by(
        desc(models.ReferralCode.usage_count),
        models.ReferralCode.id
    )
    return list(session.execute(stmt).scalars().all())


def get_total_usage_count(session: Session) -> Optional[int]:
    # на пустой таблице SUM возвращает NULL
    stmt = select(func.sum(models.ReferralCode.usage_count))
    return session.execute(stmt).scalar_one_or_none()


def count_referral_codes(session: Session, is_active: Optional[bool] = None) -> int:
    stmt = select(func.count(models.ReferralCode.id))
    if is_active is not None:
        stmt = stmt.where(models.ReferralCode.is_active == is_active)
    return session.execute(stmt).scalar_one()
