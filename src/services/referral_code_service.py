from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src import crud, models, schemas, exceptions
from src.config.settings import settings
from src.config.referral_codes import default_referral_codes

logger = logging.getLogger(__name__)


class ReferralCodeService:
    """
    Бизнес-логика реферальных кодов.

    Состояния не хранит, все живет в базе. Уникальность кода проверяется здесь,
    уникальный индекс в базе только страхует от гонки одновременных create/update.
    """

    def __init__(self, top_limit: Optional[int] = None):
        self.top_limit = top_limit

    def create(self, session: Session, request: schemas.ReferralCodeRequest) -> models.ReferralCode:
        """Создает новый реферальный код. Новый код всегда активен и с нулевым счетчиком."""
        if crud.referral_code_exists_by_code(session, request.code):
            raise exceptions.ReferralCodeAlreadyExistsError(request.code)

        referral_code = models.ReferralCode(
            code=request.code,
            owner_name=request.owner_name,
            is_active=True,
            usage_count=0
        )
        try:
            referral_code = crud.insert_referral_code(session, referral_code)
        except IntegrityError:
            raise exceptions.ReferralCodeAlreadyExistsError(request.code)

        logger.info(f"Referral code {referral_code.code} created for {referral_code.owner_name} (id={referral_code.id})")
        return referral_code

    def list_all(self, session: Session) -> List[models.ReferralCode]:
        return crud.get_all_referral_codes(session)

    def list_active(self, session: Session) -> List[models.ReferralCode]:
        return crud.get_active_referral_codes(session)

    def get_by_id(self, session: Session, referral_code_id: int) -> models.ReferralCode:
        referral_code = crud.get_referral_code_by_id(session, referral_code_id)
        if not referral_code:
            raise exceptions.ReferralCodeNotFoundError(f"Referral code not found with ID: {referral_code_id}")
        return referral_code

    def get_by_code(self, session: Session, code: str) -> models.ReferralCode:
        referral_code = crud.get_referral_code_by_code(session, code)
        if not referral_code:
            raise exceptions.ReferralCodeNotFoundError(f"Referral code not found: {code}")
        return referral_code

    def is_valid(self, session: Session, code: str) -> bool:
        """Код валиден, если он существует и активен"""
        return crud.get_active_referral_code_by_code(session, code) is not None

    def get_active_entity_by_code(self, session: Session, code: str) -> Optional[models.ReferralCode]:
        return crud.get_active_referral_code_by_code(session, code)

    def update(
        self,
        session: Session,
        referral_code_id: int,
        request: schemas.ReferralCodeRequest
    ) -> models.ReferralCode:
        """
        Меняет code и owner_name. Статус и счетчик не трогаем.
        Если код меняется на уже занятый другим кодом - ошибка.
        """
        referral_code = self.get_by_id(session, referral_code_id)

        if referral_code.code != request.code and crud.referral_code_exists_by_code(session, request.code):
            raise exceptions.ReferralCodeAlreadyExistsError(request.code)

        referral_code.code = request.code
        referral_code.owner_name = request.owner_name
        try:
            referral_code = crud.save_referral_code(session, referral_code)
        except IntegrityError:
            raise exceptions.ReferralCodeAlreadyExistsError(request.code)

        logger.info(f"Referral code id={referral_code.id} updated: {referral_code.code} ({referral_code.owner_name})")
        return referral_code

    def delete(self, session: Session, referral_code_id: int) -> None:
        if not crud.referral_code_exists_by_id(session, referral_code_id):
            raise exceptions.ReferralCodeNotFoundError(f"Referral code not found with ID: {referral_code_id}")
        crud.delete_referral_code_by_id(session, referral_code_id)
        logger.info(f"Referral code id={referral_code_id} deleted")

    def deactivate(self, session: Session, referral_code_id: int) -> models.ReferralCode:
        return self._set_active(session, referral_code_id, False)

    def activate(self, session: Session, referral_code_id: int) -> models.ReferralCode:
        return self._set_active(session, referral_code_id, True)

    def _set_active(self, session: Session, referral_code_id: int, is_active: bool) -> models.ReferralCode:
        referral_code = self.get_by_id(session, referral_code_id)
        referral_code.is_active = is_active
        referral_code = crud.save_referral_code(session, referral_code)
        logger.info(f"Referral code {referral_code.code} {'activated' if is_active else 'deactivated'}")
        return referral_code

    def search_by_owner_name(self, session: Session, owner_name: str) -> List[models.ReferralCode]:
        return crud.search_referral_codes_by_owner_name(session, owner_name)

    def top_by_usage(self, session: Session) -> List[models.ReferralCode]:
        limit = self.top_limit if self.top_limit is not None else settings.TOP_REFERRAL_CODES_LIMIT
        return crud.get_top_referral_codes(session, limit)

    def with_min_usage(self, session: Session, min_usage: int) -> List[models.ReferralCode]:
        return crud.get_referral_codes_by_min_usage(session, min_usage)

    def total_usage_count(self, session: Session) -> int:
        total = crud.get_total_usage_count(session)
        return total if total is not None else 0

    def get_statistics(self, session: Session) -> schemas.ReferralCodeStatistics:
        total_codes = crud.count_referral_codes(session)
        active_codes = crud.count_referral_codes(session, is_active=True)
        return schemas.ReferralCodeStatistics(
            total_codes=total_codes,
            active_codes=active_codes,
            inactive_codes=total_codes - active_codes,
            total_usage=self.total_usage_count(session)
        )

    def increment_usage(self, session: Session, code: str) -> None:
        """
        Увеличивает счетчик использований на 1.
        Неизвестный код - не ошибка, просто ничего не делаем
        """
        referral_code = crud.get_referral_code_by_code(session, code)
        if not referral_code:
            logger.debug(f"Usage increment skipped, referral code {code} not found")
            return

        referral_code.increment_usage_count()
        crud.save_referral_code(session, referral_code)
        logger.debug(f"Referral code {code} usage count is now {referral_code.usage_count}")

    def seed_defaults(self, session: Session) -> List[str]:
        """
        Создает дефолтные реферальные коды, которых еще нет в базе.
        Существующие коды не трогаем, повторный запуск ничего не создает.
        Возвращает список созданных кодов
        """
        created = []
        for default_code in default_referral_codes:
            if crud.referral_code_exists_by_code(session, default_code.code):
                continue
            self.create(
                session,
                schemas.ReferralCodeRequest(code=default_code.code, owner_name=default_code.owner_name)
            )
            created.append(default_code.code)

        logger.info(f"Default referral codes initialized: {len(created)} created, {len(default_referral_codes) - len(created)} already existed")
        return created


referral_code_service = ReferralCodeService()
