import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from videohub.core.exceptions import ConflictError, NotFoundError
from videohub.models.comment import Comment
from videohub.models.comment_rating import CommentRating, RatingType
from videohub.models.user import User
from videohub.schemas.comment import CommentRatingResponse

logger = logging.getLogger(__name__)


class CommentRatingService:
    """
    Like/dislike ratings on comments.

    A user holds at most one rating per comment. Rating again with the same
    value removes it, rating with the other value flips it. The comment's
    likesCount/dislikesCount are recounted from the rating rows inside the same
    transaction as the row change.
    """

    def __init__(self, db: Session):
        self.db = db

    def rate_comment(self, user_id: int, comment_id: int, rating: RatingType) -> CommentRatingResponse:
        rating = RatingType(rating)

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User not found with ID: {user_id}")

        comment = self._get_comment_for_update(comment_id)
        if not comment:
            raise NotFoundError(f"Comment not found with ID: {comment_id}")

        existing = self._find_rating(user_id, comment_id)
        try:
            if existing is None:
                self.db.add(CommentRating(user=user, comment=comment, rating=rating))
                user_rating = rating
                action = "created"
            elif existing.rating == rating:
                self.db.delete(existing)
                user_rating = None
                action = "removed"
            else:
                existing.rating = rating
                user_rating = rating
                action = "changed"

            response = self._recount(comment, user_rating)
            self.db.commit()
        except IntegrityError as e:
            # Concurrent first rating by the same user hit the unique constraint
            self.db.rollback()
            logger.warning(
                "Concurrent rating rejected",
                extra={"comment_id": comment_id, "user_id": user_id},
            )
            raise ConflictError("Rating for this comment changed concurrently, please retry") from e
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Comment rating %s",
            action,
            extra={"comment_id": comment_id, "user_id": user_id, "rating": rating.value},
        )
        return response

    def get_rating(self, comment_id: int, user_id: Optional[int] = None) -> CommentRatingResponse:
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise NotFoundError(f"Comment not found with ID: {comment_id}")

        user_rating = None
        if user_id is not None:
            existing = self._find_rating(user_id, comment_id)
            if existing is not None:
                user_rating = existing.rating

        return CommentRatingResponse(
            commentId=comment.id,
            likes=comment.likesCount or 0,
            dislikes=comment.dislikesCount or 0,
            userRating=user_rating.value if user_rating is not None else None,
        )

    def delete_rating(self, user_id: int, comment_id: int) -> None:
        """Remove the user's rating if there is one; a missing rating is not an error."""
        comment = self._get_comment_for_update(comment_id)
        if not comment:
            return
        existing = self._find_rating(user_id, comment_id)
        if existing is None:
            return

        try:
            self.db.delete(existing)
            self._recount(comment, None)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Comment rating removed",
            extra={"comment_id": comment_id, "user_id": user_id},
        )

    def _get_comment_for_update(self, comment_id: int) -> Optional[Comment]:
        # Row lock serializes counter read-modify-write on backends that support it
        return (
            self.db.query(Comment)
            .filter(Comment.id == comment_id)
            .with_for_update()
            .first()
        )

    def _find_rating(self, user_id: int, comment_id: int) -> Optional[CommentRating]:
        return (
            self.db.query(CommentRating)
            .filter(CommentRating.userId == user_id, CommentRating.commentId == comment_id)
            .first()
        )

    def _recount(self, comment: Comment, user_rating: Optional[RatingType]) -> CommentRatingResponse:
        self.db.flush()
        counts = dict(
            self.db.query(CommentRating.rating, func.count(CommentRating.id))
            .filter(CommentRating.commentId == comment.id)
            .group_by(CommentRating.rating)
            .all()
        )
        comment.likesCount = counts.get(RatingType.like, 0)
        comment.dislikesCount = counts.get(RatingType.dislike, 0)

        return CommentRatingResponse(
            commentId=comment.id,
            likes=comment.likesCount,
            dislikes=comment.dislikesCount,
            userRating=user_rating.value if user_rating is not None else None,
        )
