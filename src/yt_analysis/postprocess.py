"""
Line-scanning heuristics that turn free-form LLM output into structured fields.

The scans are intentionally crude: any line containing a trigger phrase turns
collection on, even outside a real section. Callers rely on the exact trigger
phrases, the bullet rules and the cap of five items, so keep them stable.
"""
import re
from typing import Iterable, List, Optional

from yt_analysis.models import Analysis, Framework, FrameworkComponent, Topic

MAX_ITEMS = 5
SUMMARY_CHARS = 500

TAKEAWAY_TRIGGERS = ("key takeaway", "main point")
TOPIC_TRIGGERS = ("topic", "theme", "subject")

NO_TAKEAWAYS_PLACEHOLDER = "No specific key takeaways identified"
PLACEHOLDER_TOPIC = Topic(title="General Content", description="The main content of the video")

_NUMBERED_LINE = re.compile(r"^\d+\.")
_LIST_MARKER = re.compile(r"^[-•\d\.]+\s*")


def _is_list_line(line: str) -> bool:
    # Only unindented items count; "  - foo" is ignored.
    return bool(line.strip()) and (line.startswith("-") or line.startswith("•") or bool(_NUMBERED_LINE.match(line)))


def _strip_marker(line: str) -> str:
    return _LIST_MARKER.sub("", line, count=1).strip()


def _scan_section_items(text: str, triggers: Iterable[str]) -> List[str]:
    triggers = tuple(triggers)
    items: List[str] = []
    in_section = False

    for line in text.split("\n"):
        lowered = line.lower()
        if any(trigger in lowered for trigger in triggers):
            in_section = True
            continue

        if in_section and _is_list_line(line):
            items.append(_strip_marker(line))

        if len(items) >= MAX_ITEMS:
            break

    return items


def extract_key_takeaways(text: str) -> List[str]:
    takeaways = _scan_section_items(text, TAKEAWAY_TRIGGERS)
    return takeaways or [NO_TAKEAWAYS_PLACEHOLDER]


def extract_topics(text: str) -> List[Topic]:
    topics = [
        Topic(title=title, description=f"Discussion about {title}")
        for title in _scan_section_items(text, TOPIC_TRIGGERS)
    ]
    return topics or [PLACEHOLDER_TOPIC.model_copy()]


def build_analysis(text: str, title: str, framework_title: Optional[str] = None) -> Analysis:
    """Structured analysis from the raw LLM output for a video titled ``title``."""
    summary = text[:SUMMARY_CHARS]
    return Analysis(
        title=title,
        framework=Framework(
            title=framework_title or title,
            components=[FrameworkComponent(heading="Summary", description=summary)],
        ),
        summary=summary,
        key_takeaways=extract_key_takeaways(text),
        topics=extract_topics(text),
    )


def fallback_analysis(title: str) -> Analysis:
    """Static analysis used whenever no LLM output is available."""
    return Analysis(
        title=title,
        framework=Framework(
            title=f"Framework for {title}",
            components=[
                FrameworkComponent(
                    heading="Summary",
                    description="A summary of the video could not be generated automatically.",
                )
            ],
        ),
        summary="Unable to generate a summary for this video.",
        key_takeaways=[
            "Automatic key takeaways could not be generated.",
            "Please watch the video for the main points.",
        ],
        topics=[Topic(title="Video Content", description="The main content of the video.")],
    )
