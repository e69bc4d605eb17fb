from videohub.models.user import User
from videohub.models.video import Video
from videohub.models.comment import Comment
from videohub.models.comment_rating import CommentRating

__all__ = ["User", "Video", "Comment", "CommentRating"]
