"""
Model -> JSON dict conversion.

Author identity rules:
    - anonymous content exposes only the generated handle
    - the author id never leaves the server; ``is_author`` tells the viewer
      whether the content is theirs
    - moderator payloads (include_author=True) add the real username
"""

from .formatting import display_name, time_ago
from .reactions import empty_counts, empty_user_reactions

REMOVED_BY_MODERATOR = "[removed by moderator]"
DELETED_PLACEHOLDER = "[deleted]"


def is_author(obj, viewer):
    return bool(viewer is not None and viewer.is_authenticated and obj.author_id == viewer.id)


def author_payload(obj, include_author=False):
    payload = {
        "username": display_name(obj),
        "is_anonymous": obj.is_anonymous,
    }
    if include_author:
        payload["account"] = obj.author.username
    return payload


def serialize_post(post, viewer=None, counts=None, mine=None, comment_count=0, include_author=False):
    payload = {
        "id": str(post.id),
        "title": post.title,
        "content": post.content,
        "category": post.category,
        "is_anonymous": post.is_anonymous,
        "author": author_payload(post, include_author),
        "is_author": is_author(post, viewer),
        "status": post.status,
        "created_at": post.created_at.isoformat(),
        "updated_at": post.updated_at.isoformat(),
        "time_ago": time_ago(post.created_at),
        "reaction_counts": counts or empty_counts(),
        "user_reactions": mine or empty_user_reactions(),
        "comment_count": comment_count,
    }
    if include_author:
        payload["moderation_reason"] = post.moderation_reason
        payload["moderated_at"] = post.moderated_at.isoformat() if post.moderated_at else None
    return payload


def serialize_comment(comment, viewer=None, counts=None, mine=None, include_author=False):
    """
    Flat comment payload (no tree fields).

    Moderated comments keep their slot in the thread but lose their text.
    """
    counts = counts or empty_counts()
    mine = mine or empty_user_reactions()
    content = comment.content
    if comment.status == 'moderated' and not include_author:
        content = REMOVED_BY_MODERATOR
    return {
        "id": str(comment.id),
        "post_id": str(comment.post_id),
        "parent_id": str(comment.parent_id) if comment.parent_id else None,
        "content": content,
        "is_anonymous": comment.is_anonymous,
        "author": author_payload(comment, include_author),
        "is_author": is_author(comment, viewer),
        "status": comment.status,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
        "time_ago": time_ago(comment.created_at),
        "reaction_counts": counts,
        "user_reactions": mine,
        "upvotes": counts["upvotes"],
        "has_upvoted": mine["upvote"],
    }


def tombstone(payload):
    """Blank out a deleted comment that still anchors visible replies."""
    payload.update({
        "content": DELETED_PLACEHOLDER,
        "is_anonymous": True,
        "author": {"username": "Anonymous", "is_anonymous": True},
        "is_author": False,
    })
    return payload


def serialize_reaction(reaction):
    return {
        "id": str(reaction.id),
        "post_id": str(reaction.post_id) if reaction.post_id else None,
        "comment_id": str(reaction.comment_id) if reaction.comment_id else None,
        "reaction_type": reaction.reaction_type,
        "created_at": reaction.created_at.isoformat(),
    }


def serialize_report(report):
    return {
        "id": str(report.id),
        "post_id": str(report.post_id) if report.post_id else None,
        "comment_id": str(report.comment_id) if report.comment_id else None,
        "reason": report.reason,
        "description": report.description,
        "status": report.status,
        "reporter": report.reporter.username,
        "reviewed_by": report.reviewed_by.username if report.reviewed_by else None,
        "reviewed_at": report.reviewed_at.isoformat() if report.reviewed_at else None,
        "created_at": report.created_at.isoformat(),
    }


def serialize_room(room, active_users=0, viewer=None):
    return {
        "id": str(room.id),
        "name": room.name,
        "description": room.description,
        "category": room.category,
        "max_users": room.max_users,
        "is_private": room.is_private,
        "room_code": room.room_code,
        "is_active": room.is_active,
        "is_creator": bool(viewer is not None and viewer.is_authenticated and room.created_by_id == viewer.id),
        "created_at": room.created_at.isoformat(),
        "active_users": active_users,
    }


def serialize_participant(participant):
    return {
        "username": participant.username,
        "is_online": participant.is_online,
        "last_seen": participant.last_seen.isoformat(),
    }


def serialize_message(message, viewer=None):
    return {
        "id": str(message.id),
        "room_id": str(message.room_id),
        "username": message.username,
        "content": message.content,
        "is_system": message.is_system,
        "is_own": bool(viewer is not None and viewer.is_authenticated and message.user_id == viewer.id),
        "created_at": message.created_at.isoformat(),
    }


def serialize_feedback(feedback):
    return {
        "feedback_id": str(feedback.feedback_id),
        "submission_date": feedback.submission_date.isoformat(),
        "satisfaction_rating": feedback.satisfaction_rating,
        "usage_frequency": feedback.usage_frequency,
        "feature_rating": feedback.feature_rating,
        "improvement_areas": feedback.improvement_areas,
        "feature_request": feedback.feature_request,
        "general_feedback": feedback.general_feedback,
    }
