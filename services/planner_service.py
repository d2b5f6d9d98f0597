"""
Planner Service - study plans, chapter flows, chapter lists and topic breakdowns.

All of these fall back to an offline placeholder when the model's response
can't be decoded; upstream failures still propagate.
"""
from typing import List

from pydantic import TypeAdapter

from services import fallbacks, prompts
from services.graph_layout import assemble_graph, layout_flow_data
from services.pipeline import Feature, PipelineResult, run_feature
from services.schemas import Chapter, StudyGraph, TopicBreakdown, TopicsByChapter

_chapter_list = TypeAdapter(List[Chapter])


def _parse_chapters(decoded) -> List[Chapter]:
    if isinstance(decoded, dict):
        decoded = decoded.get('chapters')
    chapters = _chapter_list.validate_python(decoded)
    if not chapters:
        raise ValueError("no chapters returned")
    return chapters


def _layout_breakdown(breakdown: TopicBreakdown) -> TopicBreakdown:
    return breakdown.model_copy(update={'flowData': layout_flow_data(breakdown.flowData)})


STUDY_PLAN = Feature(
    name='study-plan',
    build_prompt=prompts.study_plan_prompt,
    parse=StudyGraph.model_validate,
    fallback=lambda p: fallbacks.fallback_study_graph(p['subject']),
    post_process=assemble_graph,
)

CHAPTER_FLOW = Feature(
    name='chapter-flow',
    build_prompt=prompts.chapter_flow_prompt,
    parse=StudyGraph.model_validate,
    fallback=lambda p: fallbacks.fallback_study_graph(p['subject']),
    post_process=assemble_graph,
)

CHAPTERS = Feature(
    name='chapters',
    build_prompt=prompts.chapters_prompt,
    parse=_parse_chapters,
    expect=None,
    fallback=lambda p: fallbacks.fallback_chapters(p['subject']),
)

TOPICS = Feature(
    name='topics',
    build_prompt=prompts.topics_prompt,
    parse=TopicBreakdown.model_validate,
    fallback=lambda p: fallbacks.fallback_topic_breakdown(p['chapter']),
    post_process=_layout_breakdown,
)

ALL_TOPICS = Feature(
    name='all-topics',
    build_prompt=prompts.all_topics_prompt,
    parse=TopicsByChapter.model_validate,
    fallback=lambda p: fallbacks.fallback_topics_by_chapter(p['chapters']),
)


def generate_study_plan(subject, board, class_name, exam_title=None, date=None, client=None) -> PipelineResult:
    """Study graph for an exam, laid out on the grid"""
    params = {
        'subject': subject,
        'board': board,
        'class_name': class_name,
        'exam_title': exam_title,
        'date': date,
    }
    return run_feature(STUDY_PLAN, params, client)


def generate_chapter_flow(subject, class_level=None, exam_type=None, client=None) -> PipelineResult:
    """Chapter-level flow with per-chapter study insights"""
    params = {'subject': subject, 'class_level': class_level, 'exam_type': exam_type}
    return run_feature(CHAPTER_FLOW, params, client)


def generate_chapters(subject, board, grade, client=None) -> PipelineResult:
    return run_feature(CHAPTERS, {'subject': subject, 'board': board, 'grade': grade}, client)


def generate_topics(subject, chapter, board, grade, client=None) -> PipelineResult:
    params = {'subject': subject, 'chapter': chapter, 'board': board, 'grade': grade}
    return run_feature(TOPICS, params, client)


def generate_all_topics(subject, chapters, board, grade, client=None) -> PipelineResult:
    """
    Topic lists for several chapters at once. Chapters the model skipped
    are filled in from the fallback so every requested chapter has an entry.
    """
    params = {'subject': subject, 'chapters': list(chapters), 'board': board, 'grade': grade}
    result = run_feature(ALL_TOPICS, params, client)

    topics = dict(result.value.topicsByChapter)
    missing = [c for c in params['chapters'] if not topics.get(c)]
    if missing:
        topics.update(fallbacks.fallback_topics_by_chapter(missing).topicsByChapter)
        result.value = TopicsByChapter(topicsByChapter=topics)
    return result
