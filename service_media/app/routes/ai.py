"""
Demo AI routes. Responses are synthesized locally.
"""

from typing import Any, Dict

from ..domain.pipeline import RequiredParam, RouteContext, RouteDefinition


def chat(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    message = params["message"]
    return {
        "role": "assistant",
        "content": f'AI Response to: "{message}". This is a demo response.',
        "model": params["model"],
        "usage": {"prompt_tokens": 50, "completion_tokens": 30, "total_tokens": 80},
    }


def generate_image(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    prompt = params["prompt"]
    return {
        "prompt": prompt,
        "size": params["size"],
        "image_url": "https://picsum.photos/512/512",
        "model": "dall-e-demo",
        "revised_prompt": f"Demo revised prompt for: {prompt}",
    }


def process_text(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    text = params["text"]
    action = params["action"]

    if action == "summarize":
        result: Any = f"Summary: This is a demo summary of the provided text. {text[:100]}..."
    elif action == "translate":
        result = f"Translation: [Demo translated version of: {text[:100]}...]"
    elif action == "analyze":
        result = {
            "sentiment": "positive",
            "language": "english",
            "word_count": len(text.split(" ")),
            "keywords": ["demo", "text", "analysis"],
        }
    else:
        result = "Demo AI text processing result"

    return {"action": action, "original_text": text, "result": result}


ROUTES = [
    RouteDefinition(
        name="ai_chat",
        method="POST",
        path="/api/ai/chat",
        handler=chat,
        message="AI chat response generated",
        required=(RequiredParam("message", "Message is required"),),
        defaults={"model": "gpt-3.5-turbo"},
    ),
    RouteDefinition(
        name="ai_image",
        method="POST",
        path="/api/ai/image",
        handler=generate_image,
        message="Image generation demo",
        required=(RequiredParam("prompt", "Prompt is required"),),
        defaults={"size": "512x512"},
    ),
    RouteDefinition(
        name="ai_text",
        method="POST",
        path="/api/ai/text",
        handler=process_text,
        message="AI text processing completed",
        required=(RequiredParam("text", "Text is required"),),
        defaults={"action": "summarize"},
    ),
]
