import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from videohub.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from videohub.models.comment import Comment
from videohub.models.comment_rating import CommentRating, RatingType
from videohub.models.user import User
from videohub.models.video import Video
from videohub.schemas.comment import CommentResponse

logger = logging.getLogger(__name__)


class CommentTree:
    """
    Arena of comments indexed by id with child id lists per parent.

    Built fresh for every request from the rows it is given; replies whose
    parent is not part of the arena are simply unreachable from it.
    """

    def __init__(self, comments: Iterable[Comment], user_ratings: Optional[Dict[int, RatingType]] = None):
        self.nodes: Dict[int, Comment] = {}
        self.children: Dict[int, List[int]] = defaultdict(list)
        self.user_ratings = user_ratings or {}

        ordered = sorted(comments, key=lambda c: (c.createdAt, c.id))
        for comment in ordered:
            self.nodes[comment.id] = comment
        for comment in ordered:
            if comment.parentId is not None and comment.parentId in self.nodes:
                self.children[comment.parentId].append(comment.id)

    def roots(self) -> List[Comment]:
        """Top-level comments, newest first."""
        top_level = [c for c in self.nodes.values() if c.parentId is None]
        return sorted(top_level, key=lambda c: (c.createdAt, c.id), reverse=True)

    def to_response(self, comment_id: int) -> CommentResponse:
        comment = self.nodes[comment_id]
        rating = self.user_ratings.get(comment.id)
        return CommentResponse(
            id=comment.id,
            content=comment.content,
            createdAt=comment.createdAt,
            userId=comment.userId,
            username=comment.user.username,
            userAvatarUrl=comment.user.avatarUrl,
            videoId=comment.videoId,
            parentCommentId=comment.parentId,
            likesCount=comment.likesCount or 0,
            dislikesCount=comment.dislikesCount or 0,
            userRating=rating.value if rating is not None else None,
            replies=[self.to_response(child_id) for child_id in self.children[comment.id]],
        )


class CommentService:
    """Creates, lists and deletes comments on videos, including reply threads."""

    def __init__(self, db: Session):
        self.db = db

    def add_comment(
        self,
        content: str,
        user_id: int,
        video_id: int,
        parent_comment_id: Optional[int] = None,
    ) -> CommentResponse:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User not found with ID: {user_id}")

        video = self.db.query(Video).filter(Video.id == video_id).first()
        if not video:
            raise NotFoundError(f"Video not found with ID: {video_id}")

        parent = None
        if parent_comment_id is not None:
            parent = self.db.query(Comment).filter(Comment.id == parent_comment_id).first()
            if not parent:
                raise NotFoundError(f"Parent comment not found with ID: {parent_comment_id}")
            if parent.videoId != video.id:
                raise BadRequestError("Parent comment belongs to a different video")

        if not content or not content.strip():
            raise BadRequestError("Comment content must not be empty")

        comment = Comment(
            content=content,
            createdAt=datetime.utcnow(),
            user=user,
            video=video,
            parent=parent,
        )
        self.db.add(comment)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(comment)

        logger.info(
            "Comment created",
            extra={"comment_id": comment.id, "video_id": video.id, "parent_id": comment.parentId},
        )
        return CommentTree([comment]).to_response(comment.id)

    def list_for_video(self, video_id: int, current_user_id: Optional[int] = None) -> List[CommentResponse]:
        comments = self._comments_query().filter(Comment.videoId == video_id).all()
        tree = CommentTree(comments, self._ratings_by(current_user_id))
        return [tree.to_response(c.id) for c in tree.roots()]

    def list_all(self, current_user_id: Optional[int] = None) -> List[CommentResponse]:
        comments = self._comments_query().all()
        tree = CommentTree(comments, self._ratings_by(current_user_id))
        return [tree.to_response(c.id) for c in tree.roots()]

    def list_for_user(self, user_id: int, current_user_id: Optional[int] = None) -> List[CommentResponse]:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User not found with ID: {user_id}")

        authored = (
            self.db.query(Comment)
            .filter(Comment.userId == user_id)
            .order_by(Comment.createdAt.desc(), Comment.id.desc())
            .all()
        )
        if not authored:
            return []

        # Replies to the user's comments may come from anyone, so load whole threads
        video_ids = {c.videoId for c in authored}
        comments = self._comments_query().filter(Comment.videoId.in_(video_ids)).all()
        tree = CommentTree(comments, self._ratings_by(current_user_id))
        return [tree.to_response(c.id) for c in authored]

    def get_by_id(self, comment_id: int, current_user_id: Optional[int] = None) -> CommentResponse:
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise NotFoundError(f"Comment not found with ID: {comment_id}")

        comments = self._comments_query().filter(Comment.videoId == comment.videoId).all()
        tree = CommentTree(comments, self._ratings_by(current_user_id))
        return tree.to_response(comment.id)

    def delete_comment(self, comment_id: int, requesting_user_id: int) -> None:
        """
        Delete a comment together with its whole reply thread and all ratings
        attached to any of the deleted comments.

        Allowed for the comment author and for the uploader of the video.
        """
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise NotFoundError(f"Comment not found with ID: {comment_id}")

        video = comment.video
        if comment.userId != requesting_user_id and video.uploaderId != requesting_user_id:
            logger.warning(
                "Comment delete denied",
                extra={"comment_id": comment_id, "user_id": requesting_user_id},
            )
            raise ForbiddenError("Not authorized to delete this comment")

        if comment.parent is not None:
            comment.parent.replies.remove(comment)
        if comment in video.comments:
            video.comments.remove(comment)
        self.db.delete(comment)

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Comment deleted",
            extra={"comment_id": comment_id, "user_id": requesting_user_id},
        )

    def _comments_query(self):
        return self.db.query(Comment).options(joinedload(Comment.user))

    def _ratings_by(self, user_id: Optional[int]) -> Dict[int, RatingType]:
        if user_id is None:
            return {}
        rows = (
            self.db.query(CommentRating.commentId, CommentRating.rating)
            .filter(CommentRating.userId == user_id)
            .all()
        )
        return {comment_id: rating for comment_id, rating in rows}
