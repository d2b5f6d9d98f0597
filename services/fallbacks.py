"""
Offline placeholder results used when a model response can't be decoded.

Every supplier is deterministic and returns the same schema type as the
happy path, so routes never need to special-case a failed extraction.
"""
from typing import Iterable, List

from services.schemas import (
    Chapter,
    ConceptExplanation,
    QuizRecommendation,
    StudyEdge,
    StudyGraph,
    StudyNode,
    TopicBreakdown,
    TopicDetail,
    TopicsByChapter,
)


def _topic_titles(name: str) -> List[str]:
    return [
        f"Introduction to {name}",
        f"Key concepts in {name}",
        f"Applications of {name}",
    ]


def fallback_study_graph(subject: str) -> StudyGraph:
    """Four chained topics covering the subject"""
    labels = _topic_titles(subject) + [f"Revision and practice for {subject}"]
    hours = [2, 4, 3, 2]
    nodes = [
        StudyNode(
            id=str(i + 1),
            type='topic',
            label=label,
            description=f"Placeholder study step for {subject}",
            estimatedHours=hours[i],
        )
        for i, label in enumerate(labels)
    ]
    edges = [
        StudyEdge(id=f"e{i + 1}-{i + 2}", source=str(i + 1), target=str(i + 2))
        for i in range(len(nodes) - 1)
    ]
    return StudyGraph(nodes=nodes, edges=edges)


def fallback_chapters(subject: str) -> List[Chapter]:
    return [
        Chapter(
            id=i + 1,
            title=title,
            description="Fallback chapter",
            difficulty="Medium",
            estimatedStudyHours=3 + i,
            topics=[],
        )
        for i, title in enumerate(_topic_titles(subject))
    ]


def fallback_topic_breakdown(chapter: str) -> TopicBreakdown:
    titles = _topic_titles(chapter)
    topics = [
        TopicDetail(
            id=i + 1,
            title=title,
            description=f"Placeholder topic for {chapter}",
            keyPoints=[],
            estimatedStudyHours=2,
            prerequisites=[titles[i - 1]] if i else [],
        )
        for i, title in enumerate(titles)
    ]
    flow = {
        'nodes': [{'id': str(i + 1), 'data': {'label': title}} for i, title in enumerate(titles)],
        'edges': [
            {'id': f"e{i + 1}-{i + 2}", 'source': str(i + 1), 'target': str(i + 2)}
            for i in range(len(titles) - 1)
        ],
    }
    return TopicBreakdown(topics=topics, flowData=flow, recommendedResources=[])


def fallback_topics_by_chapter(chapters: Iterable[str]) -> TopicsByChapter:
    return TopicsByChapter(topicsByChapter={
        chapter: _topic_titles(chapter) for chapter in chapters
    })


def fallback_recommendation(subject: str, chapter: str, weak_concepts: Iterable[str]) -> QuizRecommendation:
    weak = [c for c in weak_concepts if c]
    focus = ", ".join(weak) if weak else f"the key ideas of {chapter}"
    return QuizRecommendation(
        overallAssessment=f"Review your answers for {chapter} in {subject}.",
        weakAreas=weak,
        studyPlan=f"Revisit {focus}, then retake the quiz to check your progress.",
        studyTechniques=["Active recall", "Spaced repetition"],
        practiceExercises=[f"Practice questions on {concept}" for concept in weak],
    )


def fallback_concept_explanation() -> ConceptExplanation:
    return ConceptExplanation(
        conceptual="Sorry, I couldn't generate a conceptual explanation at this time.",
        visual="Sorry, I couldn't generate a visual explanation at this time.",
        analogical="Sorry, I couldn't generate analogies at this time.",
        stepByStep="Sorry, I couldn't generate step-by-step instructions at this time.",
    )
