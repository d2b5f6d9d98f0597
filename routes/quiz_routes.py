import logging

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user

from models.study import Quiz, StudyRecommendation
from routes.utils import request_params, with_fallback_flag
from services.exam_service import get_owned, get_owned_exam
from services.quiz_service import (
    generate_quiz as build_quiz,
    store_quiz,
    calculate_score,
    recommend,
    store_attempt,
)

quiz_bp = Blueprint('quizzes', __name__)
logger = logging.getLogger(__name__)

MAX_QUESTIONS = 20


@quiz_bp.route('/quizzes/generate', methods=['POST'])
@login_required
def generate_quiz():
    """Generate MCQs for a chapter; stored when examId names one of the caller's exams"""
    data = request_params()
    subject = data.get('subject')
    chapter = data.get('chapter')
    if not subject or not chapter:
        return jsonify({'error': 'Subject and chapter are required'}), 400

    difficulty = str(data.get('difficulty') or 'medium').lower()
    try:
        question_count = int(data.get('questionCount') or current_app.config['QUIZ_DEFAULT_QUESTIONS'])
    except (TypeError, ValueError):
        return jsonify({'error': 'questionCount must be a number'}), 400
    question_count = max(1, min(question_count, MAX_QUESTIONS))

    exam = None
    if data.get('examId'):
        exam = get_owned_exam(data['examId'], current_user.id)

    result = build_quiz(subject, chapter, difficulty, question_count)
    payload = result.value
    response = {'questions': [q.model_dump() for q in payload.questions]}

    if exam is not None:
        quiz_id = store_quiz(exam.id, current_user.id, subject, chapter, difficulty, payload)
        if quiz_id is not None:
            response['quizId'] = quiz_id

    return jsonify(response)


@quiz_bp.route('/quizzes/submit', methods=['POST'])
@login_required
def submit_quiz():
    """Grade a submission and return score plus recommendations"""
    data = request_params()
    answers = data.get('answers')
    if not isinstance(answers, list):
        return jsonify({'error': 'Answers are required'}), 400
    answers = [a for a in answers if isinstance(a, dict)]

    quiz = None
    if data.get('quizId'):
        quiz = get_owned(Quiz, data['quizId'], current_user.id, 'Quiz not found')

    subject = data.get('subject') or (quiz.subject if quiz else None)
    chapter = data.get('chapter') or (quiz.chapter if quiz else None)

    grading = calculate_score(answers, quiz.questions if quiz else None)
    result = recommend(subject, chapter, grading)
    recommendation = result.value

    response = {
        'score': grading['score'],
        'correctAnswers': grading['correctAnswers'],
        'totalQuestions': grading['totalQuestions'],
        'results': grading['results'],
        'recommendations': recommendation.model_dump(),
    }

    if quiz is not None:
        response['saved'] = store_attempt(
            quiz, current_user.id, grading, recommendation,
            subject=subject, chapter=chapter,
        )

    logger.info("Quiz submission scored %s%% (%d/%d)", grading['score'],
                grading['correctAnswers'], grading['totalQuestions'])
    return jsonify(with_fallback_flag(response, result))


@quiz_bp.route('/quizzes', methods=['GET'])
@login_required
def list_quizzes():
    quizzes = (
        Quiz.query
        .filter_by(user_id=current_user.id)
        .order_by(Quiz.created_at.desc(), Quiz.id.desc())
        .all()
    )
    return jsonify({'quizzes': [quiz.to_dict() for quiz in quizzes]})


@quiz_bp.route('/study-recommendations', methods=['GET'])
@login_required
def study_recommendations():
    exam_id = request.args.get('examId')
    if not exam_id:
        return jsonify({'error': 'Exam ID is required'}), 400

    exam = get_owned_exam(exam_id, current_user.id)
    rows = (
        StudyRecommendation.query
        .filter_by(exam_id=exam.id, user_id=current_user.id)
        .order_by(StudyRecommendation.created_at.desc(), StudyRecommendation.id.desc())
        .all()
    )
    return jsonify({'recommendations': [row.to_dict() for row in rows]})
