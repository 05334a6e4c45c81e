"""Display strings per display language ("en" default, "ru")."""

from __future__ import annotations

from typing import Dict

LABELS: Dict[str, Dict[str, object]] = {
    "en": {
        "placeholder": "--",
        "not_available": "n/a",
        "just_now": "just now",
        "minutes_ago": "{n} min ago",
        "hours_ago": "{n} h ago",
        "days_ago": "{n} d ago",
        "local_time": "Local time",
        "meters": "{value} m",
        "miles": "{value} mi",
        "ten_km_plus": "≥10 km",
        "wind_variable": "Variable",
        "sky_clear": "Sky clear",
        "cloud_at": "{desc} at {height} m",
        "months": [
            "January", "February", "March", "April", "May", "June",
            "July", "August", "September", "October", "November", "December",
        ],
        "clouds": {
            "FEW": "Few",
            "SCT": "Scattered",
            "BKN": "Broken",
            "OVC": "Overcast",
            "VV": "Vertical visibility",
            "NSC": "No significant cloud",
            "CAVOK": "Ceiling and visibility OK",
            "SKC": "Sky clear",
            "CLR": "Clear",
        },
        "ratings": ["Good", "Difficult", "Dangerous", "No-fly"],
        "language_name": "English",
        "denied_title": "Access restricted",
        "denied_body": "An access key is required to use this application. Please use a valid link.",
    },
    "ru": {
        "placeholder": "--",
        "not_available": "н/д",
        "just_now": "Только что",
        "minutes_ago": "{n} мин назад",
        "hours_ago": "{n} ч назад",
        "days_ago": "{n} дн назад",
        "local_time": "Местное время",
        "meters": "{value} м",
        "miles": "{value} миль",
        "ten_km_plus": "≥10 км",
        "wind_variable": "Переменный",
        "sky_clear": "Небо чистое",
        "cloud_at": "{desc} на {height}м",
        "months": [
            "января", "февраля", "марта", "апреля", "мая", "июня",
            "июля", "августа", "сентября", "октября", "ноября", "декабря",
        ],
        "clouds": {
            "FEW": "Малооблачно",
            "SCT": "Разбросанная",
            "BKN": "Значительная",
            "OVC": "Сплошная",
            "VV": "Верт. видимость",
            "NSC": "Без сущ. облаков",
            "CAVOK": "Ясно и видимо",
            "SKC": "Ясно",
            "CLR": "Ясно",
        },
        "ratings": ["Хорошие", "Сложные", "Опасные", "Нелетные"],
        "language_name": "Russian",
        "denied_title": "Доступ ограничен",
        "denied_body": "Для доступа к приложению необходим ключ авторизации. Пожалуйста, используйте корректную ссылку.",
    },
}

DEFAULT_LANGUAGE = "en"


def label(key: str, language: str = DEFAULT_LANGUAGE):
    table = LABELS.get(language) or LABELS[DEFAULT_LANGUAGE]
    return table[key]
