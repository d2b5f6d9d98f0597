"""
Quiz Service - quiz generation, scoring and follow-up recommendations.

Quiz generation has no fallback: an undecodable response is surfaced as an
error carrying the raw text. Recommendations after a submission do fall back.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.study import Quiz, QuizQuestion, QuizAttempt, QuizAnswer, StudyRecommendation
from services import fallbacks, prompts
from services.pipeline import Feature, PipelineResult, run_feature
from services.schemas import QuizPayload, QuizRecommendation

logger = logging.getLogger(__name__)


def _number_questions(payload: QuizPayload) -> QuizPayload:
    """Give every question a unique id, keeping the model's where usable"""
    seen = set()
    questions = []
    for idx, question in enumerate(payload.questions):
        qid = question.id.strip()
        if not qid or qid in seen:
            qid = str(idx + 1)
            while qid in seen:
                qid = f"{qid}b"
        seen.add(qid)
        questions.append(question.model_copy(update={'id': qid}))
    return QuizPayload(questions=questions)


QUIZ = Feature(
    name='quiz',
    build_prompt=prompts.quiz_prompt,
    parse=QuizPayload.model_validate,
    post_process=_number_questions,
)

QUIZ_RECOMMENDATION = Feature(
    name='quiz-recommendation',
    build_prompt=prompts.quiz_recommendation_prompt,
    parse=QuizRecommendation.model_validate,
    fallback=lambda p: fallbacks.fallback_recommendation(p['subject'], p['chapter'], p['weak_concepts']),
)


def generate_quiz(subject, chapter, difficulty='medium', question_count=5, client=None) -> PipelineResult:
    params = {
        'subject': subject,
        'chapter': chapter,
        'difficulty': difficulty,
        'question_count': question_count,
    }
    return run_feature(QUIZ, params, client)


def store_quiz(exam_id, user_id, subject, chapter, difficulty, payload: QuizPayload) -> Optional[int]:
    """Persist a generated quiz. Best-effort: returns None if the save fails."""
    try:
        quiz = Quiz(
            exam_id=exam_id,
            user_id=user_id,
            subject=subject,
            chapter=chapter,
            difficulty=difficulty,
        )
        db.session.add(quiz)
        db.session.flush()

        for question in payload.questions:
            db.session.add(QuizQuestion(
                quiz_id=quiz.id,
                client_id=question.id,
                question_text=question.question,
                options=question.options,
                correct_answer=question.correctAnswer,
                explanation=question.explanation,
                difficulty=question.difficulty,
                concept_tested=question.conceptTested,
                recommended_study=question.recommendedStudyTopic,
            ))
        db.session.commit()
        logger.info("Stored quiz %s with %d questions", quiz.id, len(payload.questions))
        return quiz.id
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error saving quiz to database: %s", e)
        return None


def _normalize(answer) -> str:
    return str(answer or '').strip().casefold()


def _grade_stored(answers: List[Dict], stored_questions: List[QuizQuestion]):
    """Grade every stored question once; unanswered ones count as wrong"""
    submitted = {}
    for answer in answers:
        question_id = str(answer.get('questionId', ''))
        # first answer per question wins; repeats are ignored
        submitted.setdefault(question_id, answer.get('userAnswer'))

    results = []
    for question in stored_questions:
        question_id = str(question.client_id or question.id)
        user_answer = submitted.get(question_id)
        is_correct = (question_id in submitted
                      and _normalize(user_answer) == _normalize(question.correct_answer))
        results.append((question_id, user_answer, is_correct, question.concept_tested))
    return results


def _grade_client(answers: List[Dict]):
    return [
        (str(answer.get('questionId', '')), answer.get('userAnswer'),
         bool(answer.get('isCorrect')), answer.get('conceptTested'))
        for answer in answers
    ]


def calculate_score(answers: List[Dict], stored_questions: Optional[List[QuizQuestion]] = None) -> Dict:
    """
    Score submitted answers.

    Args:
        answers: Dicts with ``questionId``, ``userAnswer`` and, when the quiz
            isn't stored, the client-computed ``isCorrect`` and ``conceptTested``
        stored_questions: Stored questions to grade against. When given, the
            client's ``isCorrect`` is ignored, the total is the stored question
            count, and answers to unknown or repeated question ids are dropped.

    Returns:
        dict with score (percent), correct, total, weak concepts and results
    """
    if stored_questions is not None:
        graded = _grade_stored(answers, stored_questions)
    else:
        graded = _grade_client(answers)

    results = []
    correct = 0
    weak_concepts = []

    for question_id, user_answer, is_correct, concept in graded:
        if is_correct:
            correct += 1
        elif concept:
            weak_concepts.append(str(concept))

        results.append({
            'questionId': question_id,
            'userAnswer': user_answer,
            'isCorrect': is_correct,
        })

    total = len(graded)
    score = round(correct / total * 100) if total else 0

    return {
        'score': score,
        'correctAnswers': correct,
        'totalQuestions': total,
        'weakConcepts': weak_concepts,
        'results': results,
    }


def recommend(subject, chapter, grading: Dict, client=None) -> PipelineResult:
    params = {
        'subject': subject or 'the subject',
        'chapter': chapter or 'this chapter',
        'score': grading['score'],
        'correct': grading['correctAnswers'],
        'total': grading['totalQuestions'],
        'weak_concepts': grading['weakConcepts'],
    }
    return run_feature(QUIZ_RECOMMENDATION, params, client)


def store_attempt(quiz: Quiz, user_id, grading: Dict, recommendation: QuizRecommendation,
                  subject=None, chapter=None) -> bool:
    """Persist an attempt, its answers and the recommendation. Best-effort."""
    try:
        attempt = QuizAttempt(quiz_id=quiz.id, user_id=user_id, score=grading['score'])
        db.session.add(attempt)
        db.session.flush()

        for result in grading['results']:
            db.session.add(QuizAnswer(
                attempt_id=attempt.id,
                question_id=result['questionId'],
                user_answer=None if result['userAnswer'] is None else str(result['userAnswer']),
                is_correct=result['isCorrect'],
            ))

        db.session.add(StudyRecommendation(
            user_id=user_id,
            exam_id=quiz.exam_id,
            subject=subject or quiz.subject,
            chapter=chapter or quiz.chapter,
            weak_areas=recommendation.weakAreas,
            study_plan=recommendation.model_dump(),
        ))
        db.session.commit()
        return True
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error saving quiz results to database: %s", e)
        return False
