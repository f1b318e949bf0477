from typing import Dict
from cems.extensions import db
from cems.models.user_interest import UserInterest


class InterestRepository:
    @staticmethod
    def get_profile(user_id: int) -> Dict[str, int]:
        """Category -> score for one user; empty when nothing was analyzed yet."""
        entries = UserInterest.query.filter_by(user_id=user_id).all()
        return {entry.category: entry.score for entry in entries}

    @staticmethod
    def merge_scores(user_id: int, scores: Dict[str, int]) -> Dict[str, int]:
        """Raise stored scores to the new ones where the new ones are higher."""
        existing = {
            entry.category: entry
            for entry in UserInterest.query.filter_by(user_id=user_id).all()
        }
        try:
            for category, score in scores.items():
                entry = existing.get(category)
                if entry is None:
                    db.session.add(
                        UserInterest(user_id=user_id, category=category, score=score)
                    )
                elif score > entry.score:
                    entry.score = score
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return InterestRepository.get_profile(user_id)
