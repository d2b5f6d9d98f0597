"""
Prompt builders for every AI feature.

Each builder interpolates the caller's parameters into a role preamble,
spells out the exact JSON shape expected back and asks for that shape only.
Builders never validate their inputs; routes do that before calling them.
"""
from typing import Iterable, Optional

JSON_ONLY = "Return ONLY the JSON without any markdown formatting, explanation, or code blocks."


def study_plan_prompt(subject: str, board: str, class_name: str,
                      exam_title: Optional[str] = None, date: Optional[str] = None) -> str:
    exam = f"the {exam_title} exam" if exam_title else "an upcoming exam"
    when = f" scheduled on {date}" if date else ""
    return f"""Act as an educational expert and create a detailed study plan for a class {class_name} {board} student
preparing for {exam} in {subject}{when}.

The response should be in the following JSON format:
{{
  "nodes": [
    {{
      "id": "unique_id",
      "type": "topic|subtopic",
      "label": "Topic name",
      "description": "Brief description",
      "estimatedHours": number
    }}
  ],
  "edges": [
    {{
      "id": "unique_id",
      "source": "source_node_id",
      "target": "target_node_id"
    }}
  ]
}}

Important: {JSON_ONLY}
Ensure topics are organized in a logical learning sequence and every edge
references ids that appear in "nodes"."""


def chapter_flow_prompt(subject: str, class_level: Optional[str] = None,
                        exam_type: Optional[str] = None) -> str:
    level = class_level or 'high school'
    exam = f" for {exam_type} exam" if exam_type else ""
    return f"""Act as an educational expert and create a detailed study flow for a {level} student
studying the subject "{subject}"{exam}.

Generate a structured learning path with chapters, their dependencies, and study insights.
The response should be in the following JSON format:
{{
  "nodes": [
    {{
      "id": "unique_id",
      "type": "topic",
      "label": "Chapter name",
      "description": "Brief description of what this chapter covers",
      "estimatedHours": number,
      "difficulty": "easy|medium|hard",
      "studyInsights": {{
        "bestPractices": ["Practice tip 1", "Practice tip 2"],
        "commonMistakes": ["Common mistake 1", "Common mistake 2"],
        "studyTechniques": ["Technique 1", "Technique 2"],
        "resourceRecommendations": ["Resource 1", "Resource 2"]
      }}
    }}
  ],
  "edges": [
    {{ "id": "unique_id", "source": "source_node_id", "target": "target_node_id" }}
  ],
  "overallStudyStrategy": {{
    "recommendedApproach": "Brief description of overall approach",
    "timeManagement": "Tips for managing study time",
    "examPreparation": "Specific advice for exam preparation",
    "practiceRecommendations": "Recommendations for practice"
  }}
}}

Important guidelines:
1. {JSON_ONLY}
2. Generate exactly 5-7 chapters (nodes) that are essential for the subject
3. Ensure chapters are organized in a logical learning sequence
4. Estimate reasonable study hours for each chapter based on complexity
5. Create edges that connect chapters in the recommended study order
6. Some chapters may have multiple prerequisites (multiple incoming edges)
7. Use the standard curriculum for {level} {subject}"""


def chapters_prompt(subject: str, board: str, grade: str) -> str:
    return f"""Act as an educational expert for {board} board, class {grade}.

Provide a JSON response with chapters and their topics for the subject: {subject}.

Format:
[
  {{
    "id": 1,
    "title": "Chapter Title",
    "description": "Brief description",
    "difficulty": "Easy/Medium/Hard",
    "estimatedStudyHours": 5,
    "topics": ["Topic 1", "Topic 2", "Topic 3"]
  }}
]

{JSON_ONLY}"""


def topics_prompt(subject: str, chapter: str, board: str, grade: str) -> str:
    return f"""Act as an educational expert for {board} board, class {grade}.

Please provide a detailed study plan for the chapter "{chapter}" in the subject "{subject}".

Format your response as a JSON object with the following structure:
{{
  "topics": [
    {{
      "id": 1,
      "title": "Topic Title",
      "description": "Detailed description of what this topic covers",
      "keyPoints": ["Key point 1", "Key point 2"],
      "difficulty": "Easy/Medium/Hard",
      "estimatedStudyHours": 2,
      "priority": "High/Medium/Low",
      "prerequisites": ["Topic X", "Topic Y"]
    }}
  ],
  "flowData": {{
    "nodes": [
      {{ "id": "1", "data": {{ "label": "Topic 1" }} }}
    ],
    "edges": [
      {{ "id": "e1-2", "source": "1", "target": "2" }}
    ]
  }},
  "recommendedResources": [
    {{
      "title": "Resource Title",
      "type": "Video/Book/Article",
      "description": "Brief description of the resource"
    }}
  ]
}}

{JSON_ONLY}
For the flowData, create a logical learning path that shows the optimal order to study the topics."""


def all_topics_prompt(subject: str, chapters: Iterable[str], board: str, grade: str) -> str:
    chapter_lines = "\n".join(f"- {chapter}" for chapter in chapters)
    return f"""Act as an educational expert for {board} board, class {grade}.

Please provide topics for the following chapters in the subject "{subject}":
{chapter_lines}

Format your response as a JSON object with the following structure:
{{
  "topicsByChapter": {{
    "Chapter 1 Title": ["Topic 1", "Topic 2", "Topic 3"],
    "Chapter 2 Title": ["Topic 1", "Topic 2", "Topic 3"]
  }}
}}

Use the chapter titles exactly as given above as the keys.
{JSON_ONLY}"""


def quiz_prompt(subject: str, chapter: str, difficulty: str = 'medium', question_count: int = 5) -> str:
    return f"""Create a quiz for a student studying {subject}, specifically on the chapter "{chapter}".

Generate {question_count} multiple-choice questions with varying difficulty levels.
The overall difficulty should be: {difficulty} (easy/medium/hard).

Format your response as a JSON object with the following structure:
{{
  "questions": [
    {{
      "id": "1",
      "question": "Question text here?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": "Option A",
      "explanation": "Detailed explanation of why this is the correct answer",
      "difficulty": "easy/medium/hard",
      "conceptTested": "The specific concept this question tests",
      "recommendedStudyTopic": "What to study if the student gets this wrong"
    }}
  ]
}}

"correctAnswer" must repeat the text of one of the options exactly.
Ensure questions test different aspects of the chapter and cover key concepts.
{JSON_ONLY}"""


def quiz_recommendation_prompt(subject: str, chapter: str, score: int, correct: int,
                               total: int, weak_concepts: Iterable[str]) -> str:
    concepts = "\n".join(f"{i}. {concept}" for i, concept in enumerate(weak_concepts, 1)) or "None"
    return f"""I'm analyzing a student's quiz results on {subject}, chapter "{chapter}".

The student scored {score}% ({correct} out of {total} correct).

The student struggled with these concepts:
{concepts}

Based on this performance, provide:
1. A personalized study plan focusing on weak areas
2. Specific topics to review in depth
3. Recommended study techniques for these concepts
4. Suggested practice exercises

Format your response as a JSON object with these keys:
{{
  "overallAssessment": "Brief assessment of performance",
  "weakAreas": ["List of weak areas"],
  "studyPlan": "Detailed study plan",
  "studyTechniques": ["List of recommended techniques"],
  "practiceExercises": ["List of suggested exercises"]
}}

{JSON_ONLY}"""


def explain_concept_prompt(question: str, interests: Optional[str] = None) -> str:
    interest_line = f"The student is interested in: {interests}" if interests else ""
    analogy_hint = f", ideally connecting to the student's interests in {interests}" if interests else ""
    return f"""I need you to explain the following concept in multiple ways to help a student understand it better:

CONCEPT: {question}

{interest_line}

Please provide four different explanations:

1. CONCEPTUAL: A clear, straightforward explanation of the concept focusing on the fundamental principles.
2. VISUAL: Describe how this concept could be visualized with a diagram or image.
3. ANALOGICAL: Create analogies that make this concept relatable{analogy_hint}.
4. STEP_BY_STEP: Break down the concept into sequential steps or a process that's easy to follow.

Format your response as a JSON object with these string keys: "conceptual", "visual", "analogical", "stepByStep".
{JSON_ONLY}"""


def task_insights_prompt(tasks) -> str:
    """Free-text prompt; the response is shown to the user as-is."""
    task_lines = "\n".join(
        f"- Task: {task.title}, Due: {task.due_date}, Description: {task.description}"
        for task in tasks
    )
    return f"""Act as an academic advisor. Analyze the following academic tasks and provide insights:
1. Identify which tasks are urgent.
2. Suggest how to prioritize them.
3. Recommend any study techniques or tools that can help.
4. If tasks are overdue, suggest how to handle them.

Tasks:
{task_lines}"""
