"""Deck and category constants shared across core and server layers."""

ANONYMOUS_AUTHOR: str = "Anonymous"

# Category id -> display label, in the order categories are presented.
CATEGORY_NAMES: dict[str, str] = {
    "exploration": "Light Exploration",
    "insight": "Emotional Insight",
    "intimacy": "Deep Intimacy",
    "dreams": "Dreams & Aspirations",
    "values": "Values & Morality",
    "identity": "Identity & Self-Reflection",
    "relationships": "Relationships & Connection",
    "experiences": "Experiences & Memories",
    "fears": "Fears & Vulnerabilities",
    "legacy": "Future & Legacy",
    "deep": "Deep Dive",
}
