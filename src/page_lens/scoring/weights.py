"""
Scoring tables.

Tag weights seed every node's importance; key section terms mark text
worth boosting.
"""

from typing import Dict, List

DEFAULT_WEIGHT = 0.5

TAG_IMPORTANCE: Dict[str, float] = {
    # Main content
    "h1": 1.0,
    "h2": 0.9,
    "h3": 0.8,
    "h4": 0.75,
    "h5": 0.7,
    "h6": 0.65,
    "article": 0.95,
    "main": 1.0,
    "p": 0.7,
    "blockquote": 0.7,
    "pre": 0.75,
    "code": 0.7,
    "table": 0.6,
    
    "li": 0.6,
    "dd": 0.6,
    "dt": 0.65,
    "figcaption": 0.65,
    
    # Navigation / page chrome
    "nav": 0.3,
    "header": 0.35,
    "footer": 0.3,
    "aside": 0.4,
    "a": 0.4,
    
    # Controls
    "button": 0.2,
    "input": 0.2,
    "select": 0.2,
    "label": 0.25,
    
    "div": 0.5,
    "section": 0.6,
    "span": 0.5,
}

KEY_SECTION_TERMS: List[str] = [
    # Documentation
    "installation", "getting started", "quick start", "setup",
    "configuration", "usage", "api", "reference",
    # Commercial
    "pricing", "features", "benefits", "advantages",
    # Technical
    "documentation", "guide", "tutorial", "example",
    "requirements", "dependencies",
    # Support
    "faq", "troubleshooting", "common issues", "help",
    # Overview
    "overview", "introduction", "about", "summary",
]


def tag_weight(tag: str) -> float:
    return TAG_IMPORTANCE.get(tag, DEFAULT_WEIGHT)
