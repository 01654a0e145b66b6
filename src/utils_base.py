import time

"""
Базовые утилиты для всего проекта.

Тут должны быть только те утилиты, которые не связанны с бизнес логикой.
"""

def now_timestamp():
    """Получение текущего timestamp в секундах"""
    return int(time.time())


def escape_like(value: str, escape_char: str = "\\") -> str:
    """Экранирование спецсимволов LIKE, чтобы искать подстроку буквально"""
    return (
        value.replace(escape_char, escape_char * 2)
        .replace("%", f"{escape_char}%")
        .replace("_", f"{escape_char}_")
    )
