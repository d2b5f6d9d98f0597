"""Small helpers shared by the API blueprints"""
from datetime import date, datetime

from flask import request, current_app

from services.errors import CallerInputInvalid


def request_params():
    """JSON body for POST/PUT, query string for GET"""
    if request.method == 'GET':
        return request.args.to_dict()
    return request.get_json(silent=True) or {}


def board_and_grade(data):
    """Board/grade with both naming conventions and the configured defaults"""
    board = data.get('board') or data.get('examType') or current_app.config['DEFAULT_BOARD']
    grade = data.get('grade') or data.get('classLevel') or current_app.config['DEFAULT_GRADE']
    return str(board), str(grade)


def parse_date(value, field='date') -> date:
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp"""
    if isinstance(value, date):
        return value
    text = str(value or '').strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    except ValueError:
        raise CallerInputInvalid(f'Invalid {field}: expected YYYY-MM-DD')


def with_fallback_flag(payload: dict, result) -> dict:
    if result.used_fallback:
        payload['fallback'] = True
    return payload


def text_field(data, key, strip=True) -> str:
    """String field from a JSON body; missing means empty, other types are rejected"""
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise CallerInputInvalid(f'{key} must be a string')
    return value.strip() if strip else value
