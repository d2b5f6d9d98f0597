import logging

from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.study import Note
from routes.utils import text_field
from services.errors import PersistenceError
from services.exam_service import get_owned

note_bp = Blueprint('notes', __name__)
logger = logging.getLogger(__name__)

DEFAULT_COLOR = '#FFFFFF'


def _tags(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(',') if t.strip()]
    if isinstance(value, list):
        return [str(t) for t in value]
    return []


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error trying to %s: %s", action, e)
        raise PersistenceError(f'Failed to {action}') from e


@note_bp.route('', methods=['GET'])
@login_required
def list_notes():
    notes = (
        Note.query
        .filter_by(user_id=current_user.id)
        .order_by(Note.updated_at.desc(), Note.id.desc())
        .all()
    )
    return jsonify({'notes': [note.to_dict() for note in notes]})


@note_bp.route('', methods=['POST'])
@login_required
def create_note():
    data = request.get_json(silent=True) or {}
    title = text_field(data, 'title')
    if not title:
        return jsonify({'error': 'Title is required'}), 400

    note = Note(
        user_id=current_user.id,
        title=title,
        content=text_field(data, 'content', strip=False),
        tags=_tags(data.get('tags')),
        color=text_field(data, 'color') or DEFAULT_COLOR,
    )
    db.session.add(note)
    _commit('create note')
    return jsonify({'note': note.to_dict()}), 201


@note_bp.route('/<note_id>', methods=['GET'])
@login_required
def get_note(note_id):
    note = get_owned(Note, note_id, current_user.id, 'Note not found')
    return jsonify({'note': note.to_dict()})


@note_bp.route('/<note_id>', methods=['PUT'])
@login_required
def update_note(note_id):
    """Partial update: omitted fields keep their stored values"""
    note = get_owned(Note, note_id, current_user.id, 'Note not found')
    data = request.get_json(silent=True) or {}

    if 'title' in data:
        title = text_field(data, 'title')
        if not title:
            return jsonify({'error': 'Title cannot be empty'}), 400
        note.title = title
    if 'content' in data:
        note.content = text_field(data, 'content', strip=False)
    if 'tags' in data:
        note.tags = _tags(data.get('tags'))
    if 'color' in data:
        note.color = text_field(data, 'color') or DEFAULT_COLOR

    _commit('update note')
    return jsonify({'note': note.to_dict()})


@note_bp.route('/<note_id>', methods=['DELETE'])
@login_required
def delete_note(note_id):
    note = get_owned(Note, note_id, current_user.id, 'Note not found')
    db.session.delete(note)
    _commit('delete note')
    return jsonify({'success': True})
