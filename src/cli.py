import argparse
import logging

from pydantic import ValidationError

from src.database import SessionLocal
from src import schemas, exceptions
from src.services.referral_code_service import referral_code_service

from src.config.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


def _format_referral_code(referral_code) -> str:
    status = "active" if referral_code.is_active else "inactive"
    return f"#{referral_code.id} {referral_code.code} ({referral_code.owner_name}) - {status}, used {referral_code.usage_count} times"


def seed_referral_codes(session_factory=SessionLocal):
    """
    Создать дефолтные реферальные коды, которых еще нет в базе
    """
    session = session_factory()
    try:
        created = referral_code_service.seed_defaults(session)
        if created:
            print(f"Созданы реферальные коды: {', '.join(created)}")
        else:
            print("Все дефолтные реферальные коды уже существуют")
    finally:
        session.close()


def create_referral_code(code: str, owner_name: str, session_factory=SessionLocal):
    session = session_factory()
    try:
        request = schemas.ReferralCodeRequest(code=code, owner_name=owner_name)
        referral_code = referral_code_service.create(session, request)
        print(f"Реферальный код {referral_code.code} успешно создан (id={referral_code.id})")
    except exceptions.BusinessError as e:
        print(f"Ошибка: {e.message}")
    except ValidationError as e:
        print(f"Ошибка валидации: {e.errors()[0]['msg']}")
    finally:
        session.close()


def list_referral_codes(active_only: bool = False, session_factory=SessionLocal):
    session = session_factory()
    try:
        if active_only:
            referral_codes = referral_code_service.list_active(session)
        else:
            referral_codes = referral_code_service.list_all(session)
        if not referral_codes:
            print("Реферальных кодов нет")
            return
        for referral_code in referral_codes:
            print(_format_referral_code(referral_code))
    finally:
        session.close()


def set_referral_code_active(referral_code_id: int, is_active: bool, session_factory=SessionLocal):
    session = session_factory()
    try:
        if is_active:
            referral_code = referral_code_service.activate(session, referral_code_id)
        else:
            referral_code = referral_code_service.deactivate(session, referral_code_id)
        print(_format_referral_code(referral_code))
    except exceptions.BusinessError as e:
        print(f"Ошибка: {e.message}")
    finally:
        session.close()


def delete_referral_code(referral_code_id: int, force: bool = False, session_factory=SessionLocal):
    if not force:
        confirm = input(f"Удалить реферальный код #{referral_code_id}? Это действие нельзя отменить. (y/n): ")
        if confirm.lower() != 'y':
            print("Операция отменена")
            return

    session = session_factory()
    try:
        referral_code_service.delete(session, referral_code_id)
        print(f"Реферальный код #{referral_code_id} удален")
    except exceptions.BusinessError as e:
        print(f"Ошибка: {e.message}")
    finally:
        session.close()


def use_referral_code(code: str, session_factory=SessionLocal):
    session = session_factory()
    try:
        referral_code_service.increment_usage(session, code)
        print(_format_referral_code(referral_code_service.get_by_code(session, code)))
    except exceptions.ReferralCodeNotFoundError:
        print(f"Реферальный код {code} не найден, использование не засчитано")
    finally:
        session.close()


def referral_stats(session_factory=SessionLocal):
    session = session_factory()
    try:
        stats = referral_code_service.get_statistics(session)
        print(f"Всего кодов: {stats.total_codes}")
        print(f"Активных: {stats.active_codes}")
        print(f"Неактивных: {stats.inactive_codes}")
        print(f"Всего использований: {stats.total_usage}")
        print("Топ по использованию:")
        for referral_code in referral_code_service.top_by_usage(session):
            print(f"   {_format_referral_code(referral_code)}")
    finally:
        session.close()


def main():
    parser = argparse.ArgumentParser(description='CLI для управления реферальными кодами')
    subparsers = parser.add_subparsers(dest='command', help='Доступные команды')

    subparsers.add_parser('seed-referral-codes', help='Создать дефолтные реферальные коды')

    create_parser = subparsers.add_parser('create-referral-code', help='Создать реферальный код')
    create_parser.add_argument('--code', '-c', required=True, help='Реферальный код')
    create_parser.add_argument('--owner', '-o', required=True, help='Имя владельца')

    list_parser = subparsers.add_parser('list-referral-codes', help='Показать реферальные коды')
    list_parser.add_argument('--active', action='store_true', help='Только активные')

    activate_parser = subparsers.add_parser('activate-referral-code', help='Активировать реферальный код')
    activate_parser.add_argument('--id', type=int, required=True, help='ID кода')

    deactivate_parser = subparsers.add_parser('deactivate-referral-code', help='Деактивировать реферальный код')
    deactivate_parser.add_argument('--id', type=int, required=True, help='ID кода')

    delete_parser = subparsers.add_parser('delete-referral-code', help='Удалить реферальный код')
    delete_parser.add_argument('--id', type=int, required=True, help='ID кода')
    delete_parser.add_argument('--force', action='store_true', help='Удалить без подтверждения')

    use_parser = subparsers.add_parser('use-referral-code', help='Засчитать использование реферального кода')
    use_parser.add_argument('--code', '-c', required=True, help='Реферальный код')

    subparsers.add_parser('referral-stats', help='Статистика по реферальным кодам')

    args = parser.parse_args()

    if args.command == 'seed-referral-codes':
        seed_referral_codes()
    elif args.command == 'create-referral-code':
        create_referral_code(args.code, args.owner)
    elif args.command == 'list-referral-codes':
        list_referral_codes(args.active)
    elif args.command == 'activate-referral-code':
        set_referral_code_active(args.id, True)
    elif args.command == 'deactivate-referral-code':
        set_referral_code_active(args.id, False)
    elif args.command == 'delete-referral-code':
        delete_referral_code(args.id, args.force)
    elif args.command == 'use-referral-code':
        use_referral_code(args.code)
    elif args.command == 'referral-stats':
        referral_stats()
    else:
        parser.print_help()


"""
python -m src.cli seed-referral-codes
python -m src.cli create-referral-code --code "CODE" --owner "OWNER"
python -m src.cli list-referral-codes --active
python -m src.cli activate-referral-code --id 1
python -m src.cli deactivate-referral-code --id 1
python -m src.cli delete-referral-code --id 1 --force
python -m src.cli use-referral-code --code "CODE"
python -m src.cli referral-stats
"""

if __name__ == "__main__":
    main()
