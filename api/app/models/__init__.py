"""Database models for the Palyrenet API."""

from app.models.admin_secret import AdminSecret
from app.models.collaboration import Collaboration, CollaborationApplication, collaboration_members
from app.models.event import Event
from app.models.library import LibraryResource
from app.models.message import Message, MessageReaction
from app.models.notification import Notification
from app.models.post import Comment, CommentLike, Like, Post, PostView, SavedPost
from app.models.prep import PrepResource, PrepVideo
from app.models.question import Answer, AnswerVote, Question, QuestionVote
from app.models.report import Report
from app.models.topic_suggestion import TopicSuggestion
from app.models.user import User

__all__ = [
    "User",
    "Post",
    "PostView",
    "Like",
    "SavedPost",
    "Comment",
    "CommentLike",
    "Question",
    "Answer",
    "QuestionVote",
    "AnswerVote",
    "Collaboration",
    "CollaborationApplication",
    "collaboration_members",
    "Message",
    "MessageReaction",
    "Notification",
    "Report",
    "Event",
    "LibraryResource",
    "PrepResource",
    "PrepVideo",
    "TopicSuggestion",
    "AdminSecret",
]
