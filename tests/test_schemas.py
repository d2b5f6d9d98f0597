import pytest
from pydantic import ValidationError

from services.schemas import (
    ConceptExplanation,
    QuizPayload,
    QuizQuestion,
    QuizRecommendation,
    StudyGraph,
    StudyNode,
    TopicsByChapter,
    coerce_hours,
)


@pytest.mark.parametrize("raw, expected", [
    (3, 3.0),
    ("4.5", 4.5),
    ("6 hours", 6.0),
    (-2, 0.0),
    ("lots", 0.0),
    (None, 0.0),
    (True, 0.0),
    (float('nan'), 0.0),
    ("", 0.0),
])
def test_coerce_hours(raw, expected):
    assert coerce_hours(raw) == expected


def test_node_normalisation():
    node = StudyNode.model_validate({
        'id': 7,
        'type': 'Chapter',
        'label': '  Kinematics ',
        'estimatedHours': '-3',
        'difficulty': 'HARD',
        'unexpected': 'ignored',
    })
    assert node.id == '7'
    assert node.type == 'topic'
    assert node.label == 'Kinematics'
    assert node.estimatedHours == 0.0
    assert node.difficulty == 'hard'


def test_subtopic_type_is_kept_and_unknown_difficulty_dropped():
    node = StudyNode.model_validate({'label': 'Vectors', 'type': 'subtopic', 'difficulty': 'brutal'})
    assert node.type == 'subtopic'
    assert node.difficulty is None


def test_node_requires_label():
    with pytest.raises(ValidationError):
        StudyNode.model_validate({'id': '1', 'label': '   '})


def test_graph_requires_nodes():
    with pytest.raises(ValidationError):
        StudyGraph.model_validate({'nodes': [], 'edges': []})


def test_graph_response_omits_missing_optionals():
    graph = StudyGraph.model_validate({'nodes': [{'id': '1', 'label': 'A'}]})
    body = graph.to_response()
    assert 'overallStudyStrategy' not in body
    assert 'difficulty' not in body['nodes'][0]
    assert body['nodes'][0]['position'] == {'x': 0, 'y': 0}


def test_quiz_question_resolves_letter_answers():
    question = QuizQuestion.model_validate({
        'question': 'Unit of force?',
        'options': {'A': 'Joule', 'B': 'Newton', 'C': 'Watt'},
        'correctAnswer': 'b',
    })
    assert question.options == ['Joule', 'Newton', 'Watt']
    assert question.correctAnswer == 'Newton'


def test_quiz_question_keeps_literal_single_letter_option():
    question = QuizQuestion.model_validate({
        'question': 'Pick the vowel',
        'options': ['B', 'A'],
        'correctAnswer': 'A',
    })
    assert question.correctAnswer == 'A'


def test_quiz_question_needs_two_options():
    with pytest.raises(ValidationError):
        QuizQuestion.model_validate({'question': 'q', 'options': ['only'], 'correctAnswer': 'only'})


def test_quiz_payload_needs_questions():
    with pytest.raises(ValidationError):
        QuizPayload.model_validate({'questions': []})


def test_recommendation_joins_list_study_plan():
    rec = QuizRecommendation.model_validate({'studyPlan': ['Day 1: read', 'Day 2: practice'],
                                             'weakAreas': 'Optics'})
    assert rec.studyPlan == 'Day 1: read\nDay 2: practice'
    assert rec.weakAreas == ['Optics']


def test_concept_explanation_requires_all_four_views():
    with pytest.raises(ValidationError):
        ConceptExplanation.model_validate({'conceptual': 'x', 'visual': 'y'})


def test_topics_by_chapter_must_be_a_mapping():
    with pytest.raises(ValidationError):
        TopicsByChapter.model_validate({'topicsByChapter': ['Optics']})
    parsed = TopicsByChapter.model_validate({'topicsByChapter': {'Optics': 'Lenses'}})
    assert parsed.topicsByChapter == {'Optics': ['Lenses']}
