"""
Exam Service - ownership checks and study-plan persistence.

Ownership and existence are conflated: a record that belongs to
somebody else is reported exactly like one that doesn't exist.
"""
import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.study import (
    Exam, StudyPlan, Quiz, QuizQuestion, QuizAttempt, QuizAnswer, StudyRecommendation
)
from services.errors import NotFoundOrUnauthorized, PersistenceError
from services.schemas import StudyGraph

logger = logging.getLogger(__name__)


def get_owned(model, record_id, user_id, message='Not found'):
    """Fetch ``model`` row ``record_id`` if it belongs to ``user_id``"""
    try:
        record_id = int(record_id)
    except (TypeError, ValueError):
        raise NotFoundOrUnauthorized(message)

    record = model.query.filter_by(id=record_id, user_id=user_id).first()
    if record is None:
        raise NotFoundOrUnauthorized(message)
    return record


def get_owned_exam(exam_id, user_id) -> Exam:
    return get_owned(Exam, exam_id, user_id, 'Exam not found')


def save_study_plan(exam: Exam, graph: StudyGraph) -> bool:
    """
    Replace the exam's stored plan with ``graph``.

    Best-effort: a database failure is logged and reported as False, never
    raised.
    """
    payload = graph.to_response()
    try:
        StudyPlan.query.filter_by(exam_id=exam.id).delete()
        db.session.add(StudyPlan(
            exam_id=exam.id,
            nodes=payload['nodes'],
            edges=payload['edges'],
        ))
        db.session.commit()
        logger.info("Saved study plan for exam %s (%d nodes)", exam.id, len(payload['nodes']))
        return True
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Failed to save study plan for exam %s: %s", exam.id, e)
        return False


def load_study_plan(exam: Exam) -> Optional[dict]:
    """Stored plan as ``{nodes, edges}``, or None if absent or no longer valid"""
    plan = StudyPlan.query.filter_by(exam_id=exam.id).first()
    if plan is None:
        return None
    try:
        graph = StudyGraph(nodes=plan.nodes or [], edges=plan.edges or [])
    except ValidationError as e:
        logger.warning("Stored study plan %s no longer matches schema: %s", plan.id, e)
        return None
    data = graph.to_response()
    return {'nodes': data['nodes'], 'edges': data['edges']}


def delete_exam(exam: Exam):
    """Delete an exam and everything hanging off it, children first"""
    try:
        quiz_ids = [row.id for row in db.session.query(Quiz.id).filter_by(exam_id=exam.id)]
        if quiz_ids:
            attempt_ids = [
                row.id for row in
                db.session.query(QuizAttempt.id).filter(QuizAttempt.quiz_id.in_(quiz_ids))
            ]
            if attempt_ids:
                QuizAnswer.query.filter(QuizAnswer.attempt_id.in_(attempt_ids)).delete(
                    synchronize_session=False)
            QuizAttempt.query.filter(QuizAttempt.quiz_id.in_(quiz_ids)).delete(
                synchronize_session=False)
            QuizQuestion.query.filter(QuizQuestion.quiz_id.in_(quiz_ids)).delete(
                synchronize_session=False)
            Quiz.query.filter(Quiz.id.in_(quiz_ids)).delete(synchronize_session=False)

        StudyRecommendation.query.filter_by(exam_id=exam.id).delete()
        StudyPlan.query.filter_by(exam_id=exam.id).delete()
        db.session.delete(exam)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Failed to delete exam %s: %s", exam.id, e)
        raise PersistenceError('Failed to delete exam') from e
