import logging

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from models.study import Task
from routes.utils import request_params, board_and_grade, with_fallback_flag
from services.exam_service import get_owned_exam, save_study_plan
from services.insight_service import explain_concept as explain, analyze_tasks
from services.planner_service import (
    generate_study_plan,
    generate_chapter_flow,
    generate_chapters,
    generate_topics,
    generate_all_topics,
)

study_bp = Blueprint('study', __name__)
logger = logging.getLogger(__name__)


@study_bp.route('/study-plan', methods=['POST'])
@login_required
def study_plan():
    """Generate a study graph; persisted when examId names one of the caller's exams"""
    data = request_params()
    subject = data.get('subject')
    if not subject:
        return jsonify({'error': 'Subject is required'}), 400

    exam = None
    if data.get('examId'):
        exam = get_owned_exam(data['examId'], current_user.id)

    board, grade = board_and_grade({
        'board': data.get('board'),
        'grade': data.get('className') or data.get('class'),
    })
    result = generate_study_plan(
        subject=subject,
        board=board,
        class_name=grade,
        exam_title=data.get('examTitle'),
        date=data.get('date'),
    )
    graph = result.value
    response = graph.to_response()
    payload = {'nodes': response['nodes'], 'edges': response['edges']}

    if exam is not None:
        payload['saved'] = save_study_plan(exam, graph)

    return jsonify(with_fallback_flag(payload, result))


@study_bp.route('/insights/chapter-flow', methods=['POST'])
@login_required
def chapter_flow():
    data = request_params()
    subject = data.get('subject')
    if not subject:
        return jsonify({'error': 'Subject is required'}), 400

    result = generate_chapter_flow(
        subject=subject,
        class_level=data.get('classLevel'),
        exam_type=data.get('examType'),
    )
    return jsonify(with_fallback_flag({'flowData': result.value.to_response()}, result))


@study_bp.route('/insights/chapters', methods=['GET', 'POST'])
@login_required
def chapters():
    data = request_params()
    subject = data.get('subject')
    if not subject:
        return jsonify({'error': 'Subject is required'}), 400

    board, grade = board_and_grade(data)
    result = generate_chapters(subject, board, grade)
    payload = {'chapters': [chapter.model_dump(exclude_none=True) for chapter in result.value]}
    return jsonify(with_fallback_flag(payload, result))


@study_bp.route('/insights/topics', methods=['GET', 'POST'])
@login_required
def topics():
    data = request_params()
    subject = data.get('subject')
    chapter = data.get('chapter')
    if not subject or not chapter:
        return jsonify({'error': 'Subject and chapter are required'}), 400

    board, grade = board_and_grade(data)
    result = generate_topics(subject, chapter, board, grade)
    return jsonify(with_fallback_flag(result.value.model_dump(exclude_none=True), result))


@study_bp.route('/insights/all-topics', methods=['POST'])
@login_required
def all_topics():
    data = request_params()
    subject = data.get('subject')
    chapter_names = data.get('chapters')
    if not subject or not isinstance(chapter_names, list) or not chapter_names:
        return jsonify({'error': 'Subject and a non-empty list of chapters are required'}), 400

    chapter_names = [
        (c.get('title') or c.get('name')) if isinstance(c, dict) else str(c)
        for c in chapter_names
    ]
    chapter_names = [c for c in chapter_names if c]
    if not chapter_names:
        return jsonify({'error': 'Subject and a non-empty list of chapters are required'}), 400

    board, grade = board_and_grade(data)
    result = generate_all_topics(subject, chapter_names, board, grade)
    return jsonify(with_fallback_flag(result.value.model_dump(), result))


@study_bp.route('/explain-concept', methods=['POST'])
@login_required
def explain_concept():
    """Explain a concept four ways, tuned to the student's interests"""
    data = request_params()
    question = data.get('question')
    if not question:
        return jsonify({'error': 'Question is required'}), 400

    result = explain(question, data.get('interests'))
    payload = result.value.model_dump()
    # Image generation is not wired up
    payload['visualUrl'] = None
    return jsonify(with_fallback_flag(payload, result))


@study_bp.route('/insights', methods=['GET'])
@login_required
def task_insights():
    tasks = (
        Task.query
        .filter_by(user_id=current_user.id)
        .order_by(Task.due_date.asc())
        .all()
    )
    if not tasks:
        return jsonify({'error': 'No tasks found'}), 404

    analysis = analyze_tasks(tasks)
    logger.info("Generated insights for %d tasks", len(tasks))
    return jsonify({'tasks': [task.to_dict() for task in tasks], 'analysis': analysis})
