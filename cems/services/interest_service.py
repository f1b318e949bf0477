"""Keyword-based interest detection and event recommendations.

Scores are deterministic: a category earns one point for every keyword that
appears anywhere in the text and two more when the keyword also stands as a
whole word. Category scores are ten times the points, capped at 100.
"""
import math
import re
from typing import Dict, Iterable, List

from cems.exceptions import ValidationError
from cems.models import Event
from cems.models.enums import EventStatus
from cems.repositories import EventRepository, InterestRepository
import logging

logger = logging.getLogger(__name__)

INTEREST_KEYWORDS = {
    "dance": ["dance", "dancing", "choreography", "ballet", "hiphop", "salsa", "performance", "movement"],
    "music": ["music", "singing", "song", "concert", "band", "guitar", "piano", "violin", "vocal", "melody"],
    "sports": ["sports", "basketball", "football", "soccer", "tennis", "cricket", "volleyball", "fitness", "exercise", "workout"],
    "technology": ["technology", "coding", "programming", "software", "ai", "machine learning", "web development", "hackathon", "tech"],
    "art": ["art", "painting", "drawing", "sketching", "design", "creative", "exhibition", "gallery", "craft"],
    "academic": ["academic", "workshop", "seminar", "lecture", "study", "research", "conference", "education"],
    "social": ["social", "networking", "meetup", "party", "gathering", "community", "cultural"],
}

INTEREST_NAMES = {
    "dance": "Dance & Performing Arts",
    "music": "Music & Singing",
    "sports": "Sports & Fitness",
    "technology": "Technology & Coding",
    "art": "Art & Design",
    "academic": "Academic & Workshops",
    "social": "Social & Cultural",
}

MIN_MATCH_SCORE = 30


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def detect_interests(text: str) -> Dict[str, int]:
    text_lower = text.lower()
    interests = {}
    for category, keywords in INTEREST_KEYWORDS.items():
        score = 0
        for keyword in keywords:
            if keyword in text_lower:
                score += 1
                if re.search(rf"\b{re.escape(keyword)}\b", text_lower):
                    score += 2
        if score > 0:
            interests[category] = min(score * 10, 100)
    return interests


def top_interests(profile: Dict[str, int], limit: int = 3) -> List[dict]:
    ranked = sorted(profile.items(), key=lambda item: item[1], reverse=True)
    return [{"category": category, "score": score} for category, score in ranked[:limit]]


def describe_interests(interests: Dict[str, int]) -> str:
    top = top_interests(interests)
    if not top:
        return "No strong interests detected. Try describing more specific activities you enjoy!"
    names = ", ".join(INTEREST_NAMES.get(i["category"], i["category"]) for i in top)
    return f"Based on your input, you're most interested in {names}."


def match_score(event: Event, profile: Dict[str, int]) -> int:
    score = 0.0
    category = event.category.value if event.category else None
    if category in profile:
        score += profile[category]

    event_text = f"{event.title} {event.description}".lower()
    for interest, interest_score in profile.items():
        for keyword in INTEREST_KEYWORDS.get(interest, []):
            if keyword in event_text:
                score += interest_score * 0.1

    return min(_round_half_up(score), 100)


def rank_events(events: Iterable, profile: Dict[str, int], min_match_score: int = MIN_MATCH_SCORE) -> List[dict]:
    """Score (event, registered_count) pairs and keep the good matches, best first."""
    if not profile:
        return []

    recommended = []
    for event, registered_count in events:
        score = match_score(event, profile)
        if score >= min_match_score:
            event_dict = event.to_dict(registered_count=registered_count)
            event_dict["matchScore"] = score
            recommended.append(event_dict)
    recommended.sort(key=lambda e: e["matchScore"], reverse=True)
    return recommended


class InterestService:
    @staticmethod
    def analyze(user_id: int, text: str) -> dict:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Please describe your interests first")

        detected = detect_interests(text)
        profile = InterestRepository.merge_scores(user_id, detected)
        logger.info(f"Interest analysis for user {user_id}: {detected}")
        return {
            "interests": detected,
            "analysis": describe_interests(detected),
            "topInterests": top_interests(profile),
        }

    @staticmethod
    def top_interests(user_id: int, limit: int = 3) -> List[dict]:
        if limit < 1:
            raise ValidationError("Limit must be a positive integer")
        return top_interests(InterestRepository.get_profile(user_id), limit)

    @staticmethod
    def recommend(user_id: int, min_match_score: int = MIN_MATCH_SCORE) -> List[dict]:
        profile = InterestRepository.get_profile(user_id)
        if not profile:
            return []
        approved = EventRepository.list_with_counts(status=EventStatus.APPROVED)
        return rank_events(approved, profile, min_match_score)
