"""
File extraction and conversion routes.
"""

from typing import Any, Dict
from urllib.parse import quote

from ..domain.pipeline import RequiredParam, RouteContext, RouteDefinition


DEMO_HTML = (
    "<!DOCTYPE html><html><head><title>Converted Content</title></head>"
    "<body><h1>Demo HTML Content</h1>"
    "<p>This would contain the actual converted HTML content.</p></body></html>"
)


def extract_pdf(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "url": params["url"],
        "text": "This is demo extracted text from the PDF.",
        "pages": 10,
        "file_size": "2.5MB",
        "extraction_method": "demo",
    }


def convert_image(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    target = params["format"]
    return {
        "original_url": params["url"],
        "converted_url": f"https://picsum.photos/500/500?text={quote(target)}+Converted",
        "original_format": "jpg",
        "converted_format": target,
        "file_size": "500KB",
    }


def convert_html(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "original_url": params["url"],
        "html_content": DEMO_HTML,
        "file_size": "2.1KB",
        "elements_found": 25,
    }


ROUTES = [
    RouteDefinition(
        name="pdf_extract",
        method="POST",
        path="/api/pdf/extract",
        handler=extract_pdf,
        message="PDF text extraction completed",
        required=(RequiredParam("url", "PDF URL is required"),),
    ),
    RouteDefinition(
        name="convert_image",
        method="POST",
        path="/api/convert/image",
        handler=convert_image,
        message="Image conversion completed",
        required=(RequiredParam("url", "Image URL is required"),),
        defaults={"format": "png"},
    ),
    RouteDefinition(
        name="convert_html",
        method="POST",
        path="/api/convert/html",
        handler=convert_html,
        message="HTML conversion completed",
        required=(RequiredParam("url", "URL is required"),),
    ),
]
