"""Prompt templates and response cleanup for the Gemini collaborators.

This module contains the prompt used to generate multiple-choice IQ test
questions and the prompt used to request a written analysis of a completed
test, plus the helpers that turn raw model output back into usable data.
"""

import json
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from libs.domain_types import DifficultyLevel, QuestionCategory

# Human-readable descriptions for each reasoning category
CATEGORY_DESCRIPTIONS: Dict[QuestionCategory, str] = {
    QuestionCategory.LOGICAL: (
        "Logical Reasoning: Deductive/inductive logic, syllogisms, pattern recognition"
    ),
    QuestionCategory.NUMERICAL: (
        "Numerical Reasoning: Math sequences, algebra, arithmetic, number patterns"
    ),
    QuestionCategory.VERBAL: (
        "Verbal Reasoning: Analogies, synonyms/antonyms, word relationships, vocabulary"
    ),
    QuestionCategory.SPATIAL: (
        "Spatial Reasoning: 3D visualization, rotation, folding, geometric patterns"
    ),
}

QUESTION_EXAMPLE = {
    "id": 1,
    "type": "logical",
    "question": (
        "If all roses are flowers and some flowers are red, which statement must be true?"
    ),
    "options": [
        "All roses are red",
        "Some roses might be red",
        "No roses are red",
        "All red things are roses",
    ],
    "correctAnswer": 1,
    "explanation": (
        "Since some flowers are red and all roses are flowers, it's possible that "
        "some roses could be red, but we cannot determine this with certainty."
    ),
    "difficulty": "medium",
}

QUESTION_GENERATION_PROMPT = """You are an expert psychologist and IQ test creator. Generate exactly {count} high-quality IQ test questions.

REQUIREMENTS:
- Generate questions across these categories: {category_list}
- Distribute questions evenly across categories ({per_category} questions per category)
- Mix difficulty levels: {difficulty_mix}
- Each question must have exactly 4 multiple choice options
- Questions should test genuine cognitive abilities
- Avoid cultural bias and ensure accessibility
- Include clear, educational explanations

QUESTION CATEGORIES:
{category_descriptions}

OUTPUT FORMAT:
Return ONLY a valid JSON array with this exact structure:

{example}

IMPORTANT RULES:
- correctAnswer is the index (0-3) of the correct option
- "type" must be one of: {category_values}
- "difficulty" must be one of: {difficulty_values}
- Each question must be unique and intellectually challenging
- Explanations should be clear and educational
- No duplicate questions or concepts
- Ensure proper JSON formatting
- Test a variety of cognitive skills within each category

Generate exactly {count} questions following these specifications."""

ANALYSIS_PROMPT = """You are an AI psychologist and cognitive assessment expert. Analyze this IQ test performance and provide detailed, personalized insights.

TEST RESULTS:
- IQ Score: {score}
- Questions Answered: {correct_answers}/{total_questions} ({percentage:.1f}%)
- Category Performance: {category_performance}

DETAILED BREAKDOWN:
{breakdown}

ANALYSIS REQUIREMENTS:
Please provide a comprehensive analysis covering:

1. Overall Performance Assessment
   - Interpret the IQ score in context
   - Compare to population norms
   - Overall cognitive strengths

2. Category-Specific Analysis
   - Strengths and weaknesses by reasoning type
   - What each category reveals about cognitive abilities
   - Specific insights for each area

3. Learning Patterns & Insights
   - Error patterns and what they suggest
   - Cognitive style preferences
   - Information processing tendencies

4. Personalized Recommendations
   - Specific exercises to improve weak areas
   - Strategies to leverage strengths
   - Daily practices for cognitive enhancement

5. Development Roadmap
   - Short-term goals (1-3 months)
   - Long-term cognitive development plan
   - Resources and techniques to explore

Format your response in clear, encouraging language. Be specific and actionable. Focus on growth potential rather than limitations. Keep the tone professional yet accessible, like a knowledgeable mentor providing guidance.

Length: Aim for 400-600 words for comprehensive insights."""

_JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")
_BOLD_PATTERN = re.compile(r"\*\*([^*]+)\*\*")
_ITALIC_PATTERN = re.compile(r"\*([^*]+)\*")
_HEADER_PATTERN = re.compile(r"#+ ")
_STRAY_MARKUP_PATTERN = re.compile(r"[*#]+")


def build_question_generation_prompt(
    count: int,
    categories: Sequence[QuestionCategory],
    difficulty_mix: Optional[Mapping[DifficultyLevel, float]] = None,
) -> str:
    """
    Build the prompt asking the model for ``count`` questions.

    Args:
        count: Number of questions to request
        categories: Categories to spread the questions across
        difficulty_mix: Fraction of questions per difficulty level

    Returns:
        Complete prompt string
    """
    if difficulty_mix is None:
        difficulty_mix = {
            DifficultyLevel.EASY: 0.30,
            DifficultyLevel.MEDIUM: 0.50,
            DifficultyLevel.HARD: 0.20,
        }

    mix_text = ", ".join(
        f"{level.value} ({round(difficulty_mix.get(level, 0.0) * 100)}%)"
        for level in DifficultyLevel
    )

    return QUESTION_GENERATION_PROMPT.format(
        count=count,
        category_list=", ".join(c.value for c in categories),
        per_category=count // max(len(categories), 1),
        difficulty_mix=mix_text,
        category_descriptions="\n".join(
            f"{i}. {CATEGORY_DESCRIPTIONS[c]}" for i, c in enumerate(categories, 1)
        ),
        example=json.dumps([QUESTION_EXAMPLE], indent=2),
        category_values=", ".join(c.value for c in categories),
        difficulty_values=", ".join(d.value for d in DifficultyLevel),
    )


def build_analysis_prompt(payload: Mapping[str, Any]) -> str:
    """Build the analysis prompt from ``TestResult.to_analysis_payload()``."""
    total = payload["total_questions"]
    correct = payload["correct_answers"]
    percentage = (correct / total) * 100 if total else 0.0

    category_performance = ", ".join(
        f"{category}: {pct:.1f}%"
        for category, pct in payload["category_performance"].items()
    )
    breakdown = "\n".join(
        f"Question {i} ({answer['type']}, {answer['difficulty']}): "
        f"{'✓ Correct' if answer['is_correct'] else '✗ Incorrect'}"
        for i, answer in enumerate(payload["answers"], 1)
    )

    return ANALYSIS_PROMPT.format(
        score=payload["score"],
        correct_answers=correct,
        total_questions=total,
        percentage=percentage,
        category_performance=category_performance,
        breakdown=breakdown,
    )


def clean_analysis_text(text: str) -> str:
    """Strip markdown emphasis, headers and stray ``*``/``#`` characters."""
    text = _BOLD_PATTERN.sub(r"\1", text)
    text = _ITALIC_PATTERN.sub(r"\1", text)
    text = _HEADER_PATTERN.sub("", text)
    text = _STRAY_MARKUP_PATTERN.sub("", text)
    return text.strip()


def extract_json_array(text: str) -> List[Any]:
    """
    Parse the first-to-last bracketed JSON array out of a model reply.

    Models often wrap the array in prose or code fences, so the outermost
    ``[...]`` span is parsed when present; otherwise the whole reply is.

    Raises:
        ValueError: If no JSON can be parsed or the result is not a list
    """
    match = _JSON_ARRAY_PATTERN.search(text)
    candidate = match.group(0) if match else text
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse questions from model response: {e}") from e

    if not isinstance(data, list):
        raise ValueError("Questions should be an array")
    return data
