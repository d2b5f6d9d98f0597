"""Generated content still reaches the caller when saving it fails."""
import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.study import Quiz, QuizAttempt, StudyPlan

PLAN = {
    'nodes': [{'id': '1', 'label': 'Units'}, {'id': '2', 'label': 'Motion'}],
    'edges': [{'source': '1', 'target': '2'}],
}

QUIZ = {'questions': [
    {'id': 'q1', 'question': 'SI unit of force?', 'options': ['Newton', 'Joule'], 'correctAnswer': 'Newton'},
]}


@pytest.fixture
def broken_commit(monkeypatch):
    """Call to make every later commit fail"""
    def _break():
        def fail():
            raise SQLAlchemyError("database is locked")
        monkeypatch.setattr(db.session, 'commit', fail)
    return _break


def _exam(client):
    return client.post('/api/exams', json={
        'title': 'Finals', 'subject': 'Physics', 'date': '2026-05-01',
        'board': 'CBSE', 'class': '12', 'generatePlan': False,
    }).get_json()['id']


def test_study_plan_is_returned_when_save_fails(client, fake_ai, broken_commit, app):
    exam_id = _exam(client)
    broken_commit()
    fake_ai.queue(json.dumps(PLAN))

    response = client.post('/api/study-plan', json={'subject': 'Physics', 'examId': exam_id})
    assert response.status_code == 200
    body = response.get_json()
    assert body['saved'] is False
    assert [n['label'] for n in body['nodes']] == ['Units', 'Motion']
    assert len(body['edges']) == 1

    with app.app_context():
        assert StudyPlan.query.count() == 0


def test_regenerated_plan_is_returned_when_save_fails(client, fake_ai, broken_commit):
    exam_id = _exam(client)
    broken_commit()
    fake_ai.queue(json.dumps(PLAN))

    response = client.post(f'/api/exams/{exam_id}/study-plan')
    assert response.status_code == 200
    assert response.get_json()['saved'] is False
    assert len(response.get_json()['studyPlan']['nodes']) == 2


def test_quiz_is_returned_without_id_when_save_fails(client, fake_ai, broken_commit, app):
    exam_id = _exam(client)
    broken_commit()
    fake_ai.queue(json.dumps(QUIZ))

    response = client.post('/api/quizzes/generate', json={
        'subject': 'Physics', 'chapter': 'Units', 'examId': exam_id,
    })
    assert response.status_code == 200
    body = response.get_json()
    assert 'quizId' not in body
    assert body['questions'][0]['question'] == 'SI unit of force?'

    with app.app_context():
        assert Quiz.query.count() == 0


def test_submission_is_scored_when_attempt_save_fails(client, fake_ai, broken_commit, app):
    exam_id = _exam(client)
    fake_ai.queue(json.dumps(QUIZ))
    quiz_id = client.post('/api/quizzes/generate', json={
        'subject': 'Physics', 'chapter': 'Units', 'examId': exam_id,
    }).get_json()['quizId']

    broken_commit()
    fake_ai.queue('{"overallAssessment": "Well done", "weakAreas": []}')
    response = client.post('/api/quizzes/submit', json={
        'quizId': quiz_id, 'answers': [{'questionId': 'q1', 'userAnswer': 'Newton'}],
    })
    assert response.status_code == 200
    body = response.get_json()
    assert body['saved'] is False
    assert body['score'] == 100
    assert body['recommendations']['overallAssessment'] == 'Well done'

    with app.app_context():
        assert QuizAttempt.query.count() == 0


def test_crud_save_failure_is_a_500(client, broken_commit):
    broken_commit()
    response = client.post('/api/notes', json={'title': 'Optics'})
    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to create note'}
