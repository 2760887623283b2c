"""
Text processing routes.
"""

import math
import re
from typing import Any, Dict

from ..domain.pipeline import RequiredParam, RouteContext, RouteDefinition


TEXT_REQUIRED = RequiredParam("text", "Text is required")

SUMMARY_LENGTHS = {
    "short": (50, "Demo summary"),
    "medium": (100, "Demo medium summary"),
    "long": (200, "Demo detailed summary"),
}

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")
SENTIMENTS = ("positive", "negative", "neutral")
WORDS_PER_MINUTE = 200


def preview(text: str, limit: int = 100) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def translate(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    text = params["text"]
    return {
        "original_text": text,
        "translated_text": f"[Demo translation: {text}]",
        "from_language": params["from"],
        "to_language": params["to"],
        "confidence": 0.95,
    }


def summarize(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    text, length = params["text"], params["length"]
    chars, label = SUMMARY_LENGTHS.get(length, SUMMARY_LENGTHS["medium"])
    summary = f"{text[:chars]}... [{label}]"
    return {
        "original_text": text,
        "summary": summary,
        "summary_length": length,
        "original_length": len(text),
        "compression_ratio": f"{len(summary) / len(text) * 100:.1f}%",
    }


def analyze(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    text = params["text"]
    words = text.split()
    sentences = [sentence for sentence in SENTENCE_BOUNDARY.split(text) if sentence.strip()]

    word_count = len(words)
    average_word_length = sum(len(word) for word in words) / word_count if word_count else 0.0
    average_sentence_length = word_count / len(sentences) if sentences else 0.0

    return {
        "text": preview(text),
        "word_count": word_count,
        "character_count": len(text),
        "sentence_count": len(sentences),
        "average_word_length": round(average_word_length, 1),
        "average_sentence_length": round(average_sentence_length, 1),
        "language": "english",
        "sentiment": "positive" if ctx.rng.random() > 0.5 else "neutral",
        "keywords": ["demo", "text", "analysis", "sample"],
        "reading_time": f"{math.ceil(word_count / WORDS_PER_MINUTE)} min",
    }


def sentiment(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    rng = ctx.rng
    label = rng.choice(SENTIMENTS)
    confidence = 0.7 + rng.random() * 0.3
    scores = {
        name: confidence if name == label else rng.random() * 0.3
        for name in SENTIMENTS
    }
    return {
        "text": preview(params["text"]),
        "sentiment": label,
        "confidence": round(confidence, 3),
        "scores": scores,
    }


ROUTES = [
    RouteDefinition(
        name="text_translate",
        method="POST",
        path="/api/text/translate",
        handler=translate,
        message="Translation completed",
        required=(TEXT_REQUIRED,),
        defaults={"from": "auto", "to": "en"},
    ),
    RouteDefinition(
        name="text_summarize",
        method="POST",
        path="/api/text/summarize",
        handler=summarize,
        message="Text summarization completed",
        required=(TEXT_REQUIRED,),
        defaults={"length": "medium"},
    ),
    RouteDefinition(
        name="text_analyze",
        method="POST",
        path="/api/text/analyze",
        handler=analyze,
        message="Text analysis completed",
        required=(TEXT_REQUIRED,),
    ),
    RouteDefinition(
        name="text_sentiment",
        method="POST",
        path="/api/text/sentiment",
        handler=sentiment,
        message="Sentiment analysis completed",
        required=(TEXT_REQUIRED,),
    ),
]
