"""Keyword-frequency heuristics behind the page's "generation blueprint"."""
import re
from collections import Counter
from typing import List

from video_agent.models.schemas import AgentPlan

KEYWORD_LIMIT = 6
KEYWORD_MIN_LENGTH = 4
THEME_MAX_LENGTH = 90
SLOW_PACING_FROM_SECONDS = 16

MOOD_VOCABULARY = {
    "cinematic": "epic, high-contrast lighting, sweeping motion",
    "anime": "vibrant, stylized, expressive action",
    "futuristic": "neon-lit, high-tech ambience, dynamic transitions",
    "documentary": "grounded, steady shots, observational tone",
    "surreal": "dreamlike, fluid metaphors, impossible physics",
    "minimalist": "clean framing, restrained palette, calm pacing",
}

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9\s]")


def extract_keywords(prompt: str, limit: int = KEYWORD_LIMIT) -> List[str]:
    tokens = _NON_ALPHANUMERIC.sub(" ", prompt).lower().split()
    counts = Counter(token for token in tokens if len(token) >= KEYWORD_MIN_LENGTH)
    # most_common keeps first-seen order among equal counts
    return [word for word, _ in counts.most_common(limit)]


def derive_agent_plan(prompt: str, style: str, duration: float) -> AgentPlan:
    keywords = extract_keywords(prompt)
    mood = MOOD_VOCABULARY[style]
    lead = keywords[0] if keywords else "the main concept"
    pacing = "slow cinematic" if duration >= SLOW_PACING_FROM_SECONDS else "energetic"

    return AgentPlan(
        theme=prompt.strip()[:THEME_MAX_LENGTH] or "Untitled concept",
        mood=mood,
        keywords=keywords,
        narrative_beats=[
            f'Hook: Introduce the core imagery around "{lead}" immediately.',
            "Development: Layer supporting visuals to evolve the scene with escalating motion cues.",
            "Climax: Converge tension with bold lighting and kinetic camera movement.",
            f"Resolve: Land on a memorable tableau that echoes the {style} style language.",
        ],
        visual_directives=[
            f"Duration target: {duration:g} seconds with {pacing} pacing arcs",
            f"Primary palette mood: {mood}",
            "Camera grammar: mix of wide establishing and tight hero shots for emotional contrast",
            "Motion design: emphasize smooth parallax, volumetric lighting, and particle accents",
        ],
    )
