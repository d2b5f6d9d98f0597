import logging

from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.study import Exam
from routes.utils import parse_date, with_fallback_flag
from services.errors import CallerInputInvalid, PersistenceError, UpstreamError
from services.exam_service import (
    get_owned_exam,
    save_study_plan,
    load_study_plan,
    delete_exam as delete_exam_tree,
)
from services.planner_service import generate_study_plan

exam_bp = Blueprint('exams', __name__)
logger = logging.getLogger(__name__)


def _regenerate_plan(exam: Exam) -> dict:
    """Generate a fresh plan for ``exam`` and replace the stored one (best-effort)"""
    result = generate_study_plan(
        subject=exam.subject,
        board=exam.board,
        class_name=exam.class_level,
        exam_title=exam.title,
        date=exam.date.isoformat(),
    )
    graph = result.value
    saved = save_study_plan(exam, graph)
    plan = graph.to_response()
    plan = {'nodes': plan['nodes'], 'edges': plan['edges']}
    return with_fallback_flag({'studyPlan': plan, 'saved': saved}, result)


def _parse_duration(value):
    """Exam length in whole minutes, or None when not given"""
    if value is None or value == '':
        return None
    try:
        minutes = None if isinstance(value, bool) else int(value)
    except (TypeError, ValueError):
        minutes = None
    if minutes is None or minutes < 0:
        raise CallerInputInvalid('Invalid duration: expected a number of minutes')
    return minutes


@exam_bp.route('', methods=['GET'])
@login_required
def list_exams():
    exams = (
        Exam.query
        .filter_by(user_id=current_user.id)
        .order_by(Exam.created_at.desc(), Exam.id.desc())
        .all()
    )
    return jsonify({'exams': [exam.to_dict() for exam in exams]})


@exam_bp.route('', methods=['POST'])
@login_required
def create_exam():
    """Create an exam and, unless generatePlan is false, its study plan"""
    data = request.get_json(silent=True) or {}
    title = data.get('title')
    subject = data.get('subject')
    exam_date = data.get('date')
    board = data.get('board')
    class_level = data.get('class') or data.get('className')

    if not all([title, subject, exam_date, board, class_level]):
        return jsonify({'error': 'Missing required fields: title, subject, date, board and class are required'}), 400

    exam = Exam(
        user_id=current_user.id,
        title=title,
        subject=subject,
        board=board,
        class_level=str(class_level),
        date=parse_date(exam_date),
    )
    try:
        db.session.add(exam)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error creating exam: %s", e)
        raise PersistenceError('Failed to create exam') from e

    response = exam.to_dict()
    response['studyPlan'] = None
    if data.get('generatePlan', True):
        try:
            response.update(_regenerate_plan(exam))
        except UpstreamError as e:
            # The exam is already saved; the plan can be regenerated later
            logger.warning("Exam %s created without a study plan: %s", exam.id, e.message)
            response['planError'] = e.message
    return jsonify(response), 201


@exam_bp.route('/<exam_id>', methods=['GET'])
@login_required
def get_exam(exam_id):
    exam = get_owned_exam(exam_id, current_user.id)
    response = exam.to_dict()
    response['studyPlan'] = load_study_plan(exam)
    return jsonify(response)


@exam_bp.route('/<exam_id>', methods=['PUT'])
@login_required
def update_exam(exam_id):
    data = request.get_json(silent=True) or {}
    title = data.get('title')
    subject = data.get('subject')
    exam_date = data.get('date')

    if not all([title, subject, exam_date]):
        return jsonify({'error': 'Missing required fields'}), 400

    duration = _parse_duration(data.get('duration'))
    new_date = parse_date(exam_date)

    exam = get_owned_exam(exam_id, current_user.id)
    exam.title = title
    exam.subject = subject
    exam.date = new_date
    exam.duration = duration
    exam.description = data.get('description') or ''

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error updating exam %s: %s", exam.id, e)
        raise PersistenceError('Failed to update exam') from e

    return jsonify({'exam': exam.to_dict()})


@exam_bp.route('/<exam_id>', methods=['DELETE'])
@login_required
def delete_exam(exam_id):
    exam = get_owned_exam(exam_id, current_user.id)
    delete_exam_tree(exam)
    return jsonify({'success': True})


@exam_bp.route('/<exam_id>/study-plan', methods=['POST'])
@login_required
def regenerate_study_plan(exam_id):
    """Replace the exam's plan with a newly generated one"""
    exam = get_owned_exam(exam_id, current_user.id)
    return jsonify(_regenerate_plan(exam))
