"""
Default preset catalog.

Seeded into an empty preset store on first run, one or more templates per
classroom use case.
"""

from typing import Dict, List


DEFAULT_PRESETS: List[Dict[str, str]] = [
    # Visual Schedule Items
    {
        "name": "Morning Routine Item",
        "category": "Visual Schedule",
        "model": "dall-e-3",
        "prompt": (
            "Simple, clear icon-style illustration of [ITEM] on white background, "
            "friendly style, suitable for visual schedule, minimal details, bright colors"
        ),
        "size": "1024x1024",
        "quality": "standard",
        "style": "natural",
        "notes": 'Replace [ITEM] with specific activity like "brushing teeth", "eating breakfast", etc.',
    },
    {
        "name": "Transition Activity",
        "category": "Visual Schedule",
        "model": "dall-e-3",
        "prompt": (
            "Clean, simple illustration showing [ACTIVITY] for classroom transition, "
            "clear and easy to understand, suitable for children, minimal background"
        ),
        "size": "1024x1024",
        "quality": "standard",
        "style": "natural",
        "notes": 'For activities like "line up", "sit down", "clean up"',
    },
    # Emotion Cards
    {
        "name": "Emotion Face - Basic",
        "category": "Emotion Cards",
        "model": "dall-e-3",
        "prompt": (
            "Simple, friendly cartoon face showing [EMOTION], clear facial expression, "
            "suitable for teaching emotions to children, clean white background, gentle style"
        ),
        "size": "1024x1024",
        "quality": "standard",
        "style": "natural",
        "notes": "Replace [EMOTION] with: happy, sad, angry, scared, surprised, etc.",
    },
    # Social Stories
    {
        "name": "Social Story Character",
        "category": "Social Stories",
        "model": "dall-e-3",
        "prompt": (
            "Friendly, simple cartoon character [DOING ACTION], suitable for social story, "
            "clear and encouraging, minimal background, appropriate for children"
        ),
        "size": "1024x1024",
        "quality": "standard",
        "style": "natural",
        "notes": "For sequential social stories. Keep character style consistent.",
    },
    # Educational Concepts
    {
        "name": "Learning Concept",
        "category": "Educational",
        "model": "dall-e-3",
        "prompt": (
            "Clear, simple educational illustration showing [CONCEPT], easy to understand, "
            "suitable for children, uncluttered, bright and engaging"
        ),
        "size": "1024x1024",
        "quality": "standard",
        "style": "natural",
        "notes": "For teaching concepts like colors, shapes, numbers, letters",
    },
    # Choice Boards
    {
        "name": "Choice Board Item",
        "category": "Choice Boards",
        "model": "dall-e-3",
        "prompt": (
            "Simple, clear illustration of [CHOICE] for choice board, icon style, "
            "easy to identify, suitable for classroom, white background"
        ),
        "size": "1024x1024",
        "quality": "standard",
        "style": "natural",
        "notes": "For choice boards showing activity options",
    },
]
