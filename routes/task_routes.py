import logging

from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.study import Task
from routes.utils import parse_date
from services.errors import PersistenceError
from services.exam_service import get_owned

task_bp = Blueprint('tasks', __name__)
logger = logging.getLogger(__name__)


@task_bp.route('', methods=['GET'])
@login_required
def list_tasks():
    tasks = (
        Task.query
        .filter_by(user_id=current_user.id)
        .order_by(Task.due_date.asc(), Task.id.asc())
        .all()
    )
    return jsonify({'tasks': [task.to_dict() for task in tasks]})


@task_bp.route('', methods=['POST'])
@login_required
def create_task():
    data = request.get_json(silent=True) or {}
    title = data.get('title')
    description = data.get('description')
    due_date = data.get('due_date')

    if not all([title, description, due_date]):
        return jsonify({'error': 'Title, description and due_date are required'}), 400

    task = Task(
        user_id=current_user.id,
        title=title,
        description=description,
        due_date=parse_date(due_date, 'due_date'),
    )
    try:
        db.session.add(task)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error creating task: %s", e)
        raise PersistenceError('Failed to create task') from e

    return jsonify({'task': task.to_dict()}), 201


@task_bp.route('', methods=['PUT'])
@login_required
def update_task():
    task_id = request.args.get('id')
    if not task_id:
        return jsonify({'error': 'Task ID is required'}), 400

    data = request.get_json(silent=True) or {}
    title = data.get('title')
    due_date = data.get('due_date')
    if not title or not due_date:
        return jsonify({'error': 'Title and due_date are required'}), 400

    task = get_owned(Task, task_id, current_user.id, 'Task not found')
    task.title = title
    task.due_date = parse_date(due_date, 'due_date')
    if 'description' in data:
        task.description = data.get('description') or ''

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error updating task %s: %s", task.id, e)
        raise PersistenceError('Failed to update task') from e

    return jsonify({'task': task.to_dict()})


@task_bp.route('', methods=['DELETE'])
@login_required
def delete_task():
    task_id = request.args.get('id')
    if not task_id:
        return jsonify({'error': 'Task ID is required'}), 400

    task = get_owned(Task, task_id, current_user.id, 'Task not found')
    try:
        db.session.delete(task)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error deleting task %s: %s", task.id, e)
        raise PersistenceError('Failed to delete task') from e

    return jsonify({'success': True})
