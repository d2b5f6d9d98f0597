"""Insight Service - concept explanations and task analysis"""
from services import fallbacks, prompts
from services.gemini_service import get_gemini_service
from services.pipeline import Feature, PipelineResult, run_feature
from services.schemas import ConceptExplanation

EXPLAIN_CONCEPT = Feature(
    name='explain-concept',
    build_prompt=prompts.explain_concept_prompt,
    parse=ConceptExplanation.model_validate,
    fallback=lambda p: fallbacks.fallback_concept_explanation(),
)


def explain_concept(question, interests=None, client=None) -> PipelineResult:
    return run_feature(EXPLAIN_CONCEPT, {'question': question, 'interests': interests}, client)


def analyze_tasks(tasks, client=None) -> str:
    """Free-text prioritisation advice for a list of tasks"""
    client = client or get_gemini_service()
    return client.complete(prompts.task_insights_prompt(tasks))
