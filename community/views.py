import io
import logging

import pytz
from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from . import ai, chat, feedback, reactions, support
from .errors import ApiError, api_view, parse_int, parse_json, parse_uuid
from .models import (
    ChatRoom, Comment, Post, Reaction, Report, POST_CATEGORIES,
    CONTENT_STATUS_CHOICES, REPORT_STATUS_CHOICES, ROLE_CHOICES, User, UserRole,
)
from .serializers import (
    serialize_comment, serialize_feedback, serialize_message, serialize_participant,
    serialize_post, serialize_reaction, serialize_report, serialize_room,
)
from .threads import build_comment_tree, flatten_comment_tree, COLLAPSE_DEPTH
from .usernames import generate_username


# Logger
logger = logging.getLogger(__name__)

VISIBLE_COMMENT_STATUSES = ('active', 'moderated')
CONTENT_STATUSES = [value for value, _ in CONTENT_STATUS_CHOICES]
REPORT_STATUSES = [value for value, _ in REPORT_STATUS_CHOICES]
ROLES = [value for value, _ in ROLE_CHOICES]

AI_ERROR_MESSAGE = (
    "I apologize, but I'm having trouble processing your message right now. "
    "Please try again in a moment."
)


def _text(data, field, required=False, max_length=None):
    value = data.get(field)
    value = value.strip() if isinstance(value, str) else ''
    if required and not value:
        raise ApiError(f"{field} is required")
    if max_length and len(value) > max_length:
        raise ApiError(f"{field} must be at most {max_length} characters")
    return value


def _flag(data, field, default):
    value = data.get(field, default)
    if isinstance(value, str):
        return value.lower() in ('1', 'true', 'yes')
    return bool(value)


def _handle(data, is_anonymous):
    """Handle stored on new anonymous content; non-anonymous content stores none."""
    if not is_anonymous:
        return ''
    return _text(data, 'anonymous_username', max_length=50) or generate_username()


def _me(user):
    return {
        "id": user.id,
        "username": user.username,
        "anonymous_username": user.anonymous_username,
        "role": user.role,
        "timezone": user.timezone,
    }


# ============================================================================
# SECTION 1: AUTHENTICATION & ROLES
# ============================================================================

@api_view(["POST"])
def register(request):
    data = parse_json(request)
    username = _text(data, 'username')
    password = data.get('password') or ''
    confirmation = data.get('confirmation') or ''
    tz_name = _text(data, 'timezone') or 'UTC'

    errors = []

    if not username:
        errors.append("Username is required.")
    elif len(username) < 3:
        errors.append("Username must be at least 3 characters.")
    elif len(username) > 30:
        errors.append("Username cannot exceed 30 characters.")
    elif not username.replace('_', '').isalnum() or not username.isascii():
        errors.append("Username can only contain letters, numbers, and underscores.")

    if not password:
        errors.append("Password is required.")
    elif len(password) < 8:
        errors.append("Password must be at least 8 characters.")

    if password != confirmation:
        errors.append("Passwords do not match.")

    if tz_name not in pytz.all_timezones_set:
        errors.append("Unknown timezone.")

    if errors:
        return JsonResponse({"error": errors[0], "errors": errors}, status=400)

    if User.objects.filter(username__iexact=username).exists():
        return JsonResponse({"error": "Username already taken."}, status=400)

    try:
        user = User.objects.create_user(
            username=username,
            password=password,
            anonymous_username=generate_username(),
            timezone=tz_name,
        )
    except IntegrityError as e:
        logger.warning(f"IntegrityError during registration: {str(e)}")
        return JsonResponse({"error": "Username already taken."}, status=400)

    login(request, user)
    logger.info(f"Registration success for user {user.id}")
    return JsonResponse(_me(user), status=201)


@api_view(["POST"])
def login_view(request):
    data = parse_json(request)
    user = authenticate(request, username=_text(data, 'username'), password=data.get('password') or '')
    if user is None:
        return JsonResponse({"error": "Invalid username or password."}, status=401)
    login(request, user)
    return JsonResponse(_me(user))


@api_view(["POST"])
def logout_view(request):
    logout(request)
    return JsonResponse({"message": "Logged out"})


@api_view(["GET"], auth="user")
def me(request):
    return JsonResponse(_me(request.user))


@api_view(["GET"], auth="user")
def user_role(request):
    return JsonResponse({"role": request.user.role})


@api_view(["GET", "POST"], auth="admin")
def admin_roles(request):
    if request.method == "GET":
        roles = UserRole.objects.select_related('user', 'granted_by').exclude(role='user')
        return JsonResponse({"roles": [
            {
                "user_id": r.user_id,
                "username": r.user.username,
                "role": r.role,
                "granted_by": r.granted_by.username if r.granted_by else None,
                "granted_at": r.granted_at.isoformat(),
            }
            for r in roles
        ]})

    data = parse_json(request)
    role = data.get('role')
    if role not in ROLES:
        raise ApiError(f"role must be one of: {', '.join(ROLES)}")
    user_id = parse_int(data.get('user_id'), 'user_id', None, minimum=1)
    if user_id is None:
        raise ApiError("user_id is required")
    target = get_object_or_404(User, pk=user_id)

    UserRole.objects.update_or_create(
        user=target,
        defaults={'role': role, 'granted_by': request.user},
    )
    logger.info(f"User {request.user.id} set role of user {target.id} to {role}")
    return JsonResponse({"user_id": target.id, "role": target.role})


# ============================================================================
# SECTION 2: POSTS
# ============================================================================

def _visible_comment_counts():
    return Count('comments', filter=Q(comments__status__in=VISIBLE_COMMENT_STATUSES))


def _comment_tree(post, viewer):
    comments = list(post.comments.select_related('author').order_by('created_at'))
    counts, mine = reactions.summarize('comment', [c.id for c in comments], viewer)
    return build_comment_tree(comments, viewer, counts, mine)


def _can_view(post, user):
    """Moderated posts stay visible to their author and to moderators only."""
    if post.status != 'moderated':
        return True
    return user.is_authenticated and (post.author_id == user.id or user.is_moderator)


def _own_post(request, post_id):
    post = get_object_or_404(Post.objects.exclude(status='deleted'), id=post_id)
    if post.author_id != request.user.id:
        raise ApiError("You can only change your own posts", 403)
    return post


@api_view(["GET", "POST"], auth={"POST": "user"})
def posts(request):
    if request.method == "POST":
        data = parse_json(request)
        title = _text(data, 'title', max_length=200)
        content = _text(data, 'content')
        if not title or not content:
            raise ApiError("Title and content are required")
        is_anonymous = _flag(data, 'is_anonymous', True)
        post = Post.objects.create(
            author=request.user,
            title=title,
            content=content,
            category=_text(data, 'category', max_length=50) or 'general',
            is_anonymous=is_anonymous,
            anonymous_username=_handle(data, is_anonymous),
        )
        return JsonResponse(serialize_post(post, request.user), status=201)

    category = request.GET.get('category')
    limit = parse_int(request.GET.get('limit'), 'limit', 20, minimum=1, maximum=100)
    offset = parse_int(request.GET.get('offset'), 'offset', 0)

    qs = Post.objects.filter(status='active').select_related('author')
    if category and category != 'all':
        qs = qs.filter(category=category)
    page = list(qs.annotate(comment_count=_visible_comment_counts()).order_by('-created_at')[offset:offset + limit])

    counts, mine = reactions.summarize('post', [p.id for p in page], request.user)
    return JsonResponse({
        "posts": [
            serialize_post(p, request.user, counts[p.id], mine[p.id], p.comment_count)
            for p in page
        ],
        "categories": POST_CATEGORIES,
        "limit": limit,
        "offset": offset,
    })


@api_view(["GET", "PUT", "DELETE"], auth={"PUT": "user", "DELETE": "user"})
def post_detail(request, post_id):
    if request.method == "PUT":
        post = _own_post(request, post_id)
        data = parse_json(request)
        for field, max_length in (('title', 200), ('content', None)):
            if field in data:
                value = _text(data, field, max_length=max_length)
                if not value:
                    raise ApiError(f"{field} cannot be empty")
                setattr(post, field, value)
        if 'category' in data:
            post.category = _text(data, 'category', max_length=50) or 'general'
        if 'is_anonymous' in data:
            post.is_anonymous = _flag(data, 'is_anonymous', True)
            if post.is_anonymous and not post.anonymous_username:
                post.anonymous_username = generate_username()
        post.save()
        return JsonResponse(serialize_post(post, request.user))

    if request.method == "DELETE":
        post = _own_post(request, post_id)
        post.status = 'deleted'
        post.save(update_fields=['status', 'updated_at'])
        return JsonResponse({"message": "Post deleted"})

    post = get_object_or_404(Post.objects.select_related('author').exclude(status='deleted'), id=post_id)
    if not _can_view(post, request.user):
        raise ApiError("Post not found", 404)

    counts, mine = reactions.summarize('post', [post.id], request.user)
    tree = _comment_tree(post, request.user)
    payload = serialize_post(
        post, request.user, counts[post.id], mine[post.id],
        post.comments.filter(status__in=VISIBLE_COMMENT_STATUSES).count(),
    )
    payload["comments"] = tree
    return JsonResponse(payload)


# ============================================================================
# SECTION 3: COMMENTS
# ============================================================================

def _own_comment(request, comment_id):
    comment = get_object_or_404(Comment.objects.exclude(status='deleted'), id=comment_id)
    if comment.author_id != request.user.id:
        raise ApiError("You can only change your own comments", 403)
    return comment


@api_view(["GET", "POST"], auth={"POST": "user"})
def comments(request):
    if request.method == "POST":
        data = parse_json(request)
        post_id = data.get('post_id')
        content = _text(data, 'content')
        if not post_id or not content:
            raise ApiError("post_id and content are required")
        post_uuid = parse_uuid(post_id, 'post_id')
        parent_id = data.get('parent_comment_id')
        parent_uuid = parse_uuid(parent_id, 'parent_comment_id') if parent_id else None

        post = get_object_or_404(Post, id=post_uuid, status='active')
        parent = None
        depth = 0
        if parent_uuid:
            parent = Comment.objects.filter(id=parent_uuid, post=post).exclude(status='deleted').first()
            if parent is None:
                raise ApiError("Invalid parent comment")
            parent_depth = parent.depth
            if parent_depth >= settings.COMMENT_MAX_DEPTH:
                raise ApiError("Maximum reply depth reached")
            depth = parent_depth + 1

        is_anonymous = _flag(data, 'is_anonymous', True)
        comment = Comment.objects.create(
            post=post,
            parent=parent,
            author=request.user,
            content=content,
            is_anonymous=is_anonymous,
            anonymous_username=_handle(data, is_anonymous),
        )
        payload = serialize_comment(comment, request.user)
        payload.update({
            "depth": depth,
            "children": [],
            "reply_count": 0,
            "can_reply": depth < settings.COMMENT_MAX_DEPTH,
            "collapsed": depth >= COLLAPSE_DEPTH,
        })
        return JsonResponse(payload, status=201)

    post_id = request.GET.get('post_id')
    if not post_id:
        raise ApiError("post_id is required")
    post_uuid = parse_uuid(post_id, 'post_id')
    view = request.GET.get('view', 'thread')
    if view not in ('thread', 'chat'):
        raise ApiError("view must be 'thread' or 'chat'")

    post = Post.objects.filter(id=post_uuid).exclude(status='deleted').first()
    if post is None or not _can_view(post, request.user):
        # Clients render an empty discussion rather than an error
        return JsonResponse([], safe=False)

    tree = _comment_tree(post, request.user)
    if view == 'chat':
        return JsonResponse(flatten_comment_tree(tree), safe=False)
    return JsonResponse(tree, safe=False)


@api_view(["PUT", "DELETE"], auth="user")
def comment_detail(request, comment_id):
    comment = _own_comment(request, comment_id)

    if request.method == "DELETE":
        comment.status = 'deleted'
        comment.save(update_fields=['status', 'updated_at'])
        return JsonResponse({"message": "Comment deleted"})

    data = parse_json(request)
    if 'content' in data:
        content = _text(data, 'content')
        if not content:
            raise ApiError("Content cannot be empty")
        comment.content = content
    if 'is_anonymous' in data:
        comment.is_anonymous = _flag(data, 'is_anonymous', True)
        if comment.is_anonymous and not comment.anonymous_username:
            comment.anonymous_username = generate_username()
    comment.save()
    counts, mine = reactions.summarize('comment', [comment.id], request.user)
    return JsonResponse(serialize_comment(comment, request.user, counts[comment.id], mine[comment.id]))


@api_view(["POST"], auth="user")
def comment_upvote(request, comment_id):
    comment = get_object_or_404(Comment.objects.exclude(status='deleted'), id=comment_id)
    action = reactions.toggle(request.user, 'upvote', comment=comment)
    counts, _ = reactions.summarize('comment', [comment.id])
    return JsonResponse({
        "upvoted": action == 'added',
        "upvotes": counts[comment.id]['upvotes'],
    })


def _reaction_type(value):
    if value not in reactions.REACTION_TYPES:
        raise ApiError(f"reaction_type must be one of: {', '.join(reactions.REACTION_TYPES)}")
    return value


@api_view(["GET", "POST", "DELETE"], auth={"POST": "user", "DELETE": "user"})
def comment_reactions(request, comment_id):
    comment = get_object_or_404(Comment.objects.exclude(status='deleted'), id=comment_id)

    if request.method == "GET":
        rows = comment.reactions.order_by('created_at')
        return JsonResponse({"reactions": [serialize_reaction(r) for r in rows]})

    if request.method == "POST":
        reaction_type = _reaction_type(parse_json(request).get('reaction_type'))
        changed = reactions.add(request.user, reaction_type, comment=comment)
        status = 201 if changed else 200
    else:
        reaction_type = _reaction_type(request.GET.get('reaction_type'))
        changed = reactions.remove(request.user, reaction_type, comment=comment)
        status = 200

    counts, mine = reactions.summarize('comment', [comment.id], request.user)
    return JsonResponse({
        "changed": changed,
        "reaction_counts": counts[comment.id],
        "user_reactions": mine[comment.id],
    }, status=status)


# ============================================================================
# SECTION 4: REACTIONS & REPORTS
# ============================================================================

def _resolve_target(data):
    """(post, comment) from exactly one of post_id / comment_id."""
    post_id = data.get('post_id')
    comment_id = data.get('comment_id')
    if bool(post_id) == bool(comment_id):
        raise ApiError("Provide exactly one of post_id or comment_id")
    if post_id:
        post = get_object_or_404(Post.objects.exclude(status='deleted'), id=parse_uuid(post_id, 'post_id'))
        return post, None
    comment = get_object_or_404(Comment.objects.exclude(status='deleted'), id=parse_uuid(comment_id, 'comment_id'))
    return None, comment


def _target_counts(post, comment, viewer):
    field, target = ('post', post) if post else ('comment', comment)
    counts, mine = reactions.summarize(field, [target.id], viewer)
    return counts[target.id], mine[target.id]


@api_view(["GET", "POST", "DELETE"], auth={"POST": "user", "DELETE": "user"})
def reactions_view(request):
    if request.method == "GET":
        post, comment = _resolve_target(request.GET)
        rows = Reaction.objects.filter(post=post, comment=comment)
        if request.GET.get('count'):
            return JsonResponse({"count": rows.count()})
        return JsonResponse({"reactions": [serialize_reaction(r) for r in rows.order_by('created_at')]})

    data = parse_json(request)
    if not data:
        data = request.GET
    post, comment = _resolve_target(data)
    reaction_type = _reaction_type(data.get('reaction_type'))

    if request.method == "POST":
        action = reactions.toggle(request.user, reaction_type, post=post, comment=comment)
    else:
        reactions.remove(request.user, reaction_type, post=post, comment=comment)
        action = 'removed'

    counts, mine = _target_counts(post, comment, request.user)
    return JsonResponse({"action": action, "reaction_counts": counts, "user_reactions": mine})


@api_view(["GET", "POST"], auth={"GET": "moderator", "POST": "user"})
def reports(request):
    if request.method == "GET":
        qs = Report.objects.select_related('reporter', 'reviewed_by')
        if request.GET.get('post_id'):
            qs = qs.filter(post_id=parse_uuid(request.GET['post_id'], 'post_id'))
        if request.GET.get('comment_id'):
            qs = qs.filter(comment_id=parse_uuid(request.GET['comment_id'], 'comment_id'))
        if request.GET.get('count'):
            return JsonResponse({"count": qs.count()})
        return JsonResponse({"reports": [serialize_report(r) for r in qs]})

    data = parse_json(request)
    post, comment = _resolve_target(data)
    reason = _text(data, 'reason', required=True, max_length=100)
    report = Report.objects.create(
        reporter=request.user,
        post=post,
        comment=comment,
        reason=reason,
        description=_text(data, 'description', max_length=2000),
    )
    logger.info(f"Report {report.id} filed by user {request.user.id}")
    return JsonResponse(serialize_report(report), status=201)


# ============================================================================
# SECTION 5: CHAT ROOMS
# ============================================================================

def _active_room(room_id):
    return get_object_or_404(ChatRoom, id=room_id, is_active=True)


def _room_payload(room, viewer):
    return serialize_room(room, chat.active_participants(room).count(), viewer)


@api_view(["GET", "POST"], auth={"POST": "user"})
def rooms(request):
    if request.method == "POST":
        data = parse_json(request)
        name = _text(data, 'name', required=True, max_length=100)
        max_users = parse_int(data.get('max_users'), 'max_users', 50, minimum=2, maximum=500)
        room = chat.create_room(
            request.user,
            name=name,
            description=_text(data, 'description', max_length=1000),
            category=_text(data, 'category', max_length=50),
            max_users=max_users,
            is_private=_flag(data, 'is_private', False),
        )
        return JsonResponse(serialize_room(room, 0, request.user), status=201)

    qs = chat.with_active_users(ChatRoom.objects.filter(is_active=True, is_private=False)).order_by('-created_at')
    return JsonResponse({"rooms": [serialize_room(r, r.active_users, request.user) for r in qs]})


@api_view(["GET"])
def room_by_code(request, code):
    room = get_object_or_404(ChatRoom, room_code=code.strip().upper(), is_active=True)
    return JsonResponse(_room_payload(room, request.user))


@api_view(["GET", "DELETE"], auth={"DELETE": "user"})
def room_detail(request, room_id):
    room = _active_room(room_id)
    if request.method == "DELETE":
        chat.close_room(room, request.user)
        return JsonResponse({"message": "Room closed"})
    return JsonResponse(_room_payload(room, request.user))


@api_view(["POST"], auth="user")
def room_join(request, room_id):
    room = _active_room(room_id)
    participant = chat.join_room(room, request.user, _text(parse_json(request), 'username', max_length=50))
    return JsonResponse({
        "participant": serialize_participant(participant),
        "room": _room_payload(room, request.user),
    })


@api_view(["POST"], auth="user")
def room_leave(request, room_id):
    room = _active_room(room_id)
    participant = chat.leave_room(room, request.user)
    return JsonResponse({"participant": serialize_participant(participant)})


@api_view(["POST"], auth="user")
def room_heartbeat(request, room_id):
    room = _active_room(room_id)
    participant = chat.heartbeat(room, request.user)
    return JsonResponse({"participant": serialize_participant(participant)})


@api_view(["GET"])
def room_participants(request, room_id):
    room = _active_room(room_id)
    online = list(chat.active_participants(room))
    return JsonResponse({
        "participants": [serialize_participant(p) for p in online],
        "count": len(online),
    })


@api_view(["GET", "POST"], auth={"POST": "user"})
def room_messages(request, room_id):
    room = _active_room(room_id)

    if request.method == "POST":
        content = _text(parse_json(request), 'content', required=True, max_length=2000)
        message = chat.post_message(room, request.user, content)
        return JsonResponse(serialize_message(message, request.user), status=201)

    after = None
    if request.GET.get('after'):
        after = parse_datetime(request.GET['after'].replace(' ', '+'))
        if after is None:
            raise ApiError("after must be an ISO 8601 timestamp")
        if timezone.is_naive(after):
            after = timezone.make_aware(after, pytz.UTC)
    messages = chat.recent_messages(room, after=after)
    return JsonResponse({"messages": [serialize_message(m, request.user) for m in messages]})


# ============================================================================
# SECTION 6: AI SUPPORT
# ============================================================================

@api_view(["POST"])
def ai_chat(request):
    data = parse_json(request)
    message = _text(data, 'message')
    if not message:
        raise ApiError("message is required")
    history = data.get('conversation_history') or []
    if not isinstance(history, list):
        raise ApiError("conversation_history must be a list")
    history = [entry for entry in history if isinstance(entry, dict)]
    profile = data.get('user_profile')

    if support.detect_crisis(message):
        # Never log the message itself
        logger.warning("Crisis keywords detected in AI chat; returned crisis resources")
        return JsonResponse(support.crisis_payload())

    try:
        reply = ai.generate_reply(support.build_prompt(message, history, profile))
    except ai.AIServiceError as e:
        if e.status == 503:
            logger.error("AI chat requested but GEMINI_API_KEY is not configured")
        else:
            logger.warning(f"AI chat completion failed: {e}")
        return JsonResponse({
            "error": AI_ERROR_MESSAGE,
            "response": ai.FALLBACK_RESPONSE,
        }, status=e.status)
    except Exception as e:
        logger.error(f"Unexpected AI chat error: {str(e)}", exc_info=True)
        return JsonResponse({
            "error": AI_ERROR_MESSAGE,
            "response": ai.FALLBACK_RESPONSE,
        }, status=500)

    return JsonResponse({
        "response": reply,
        "suggested_responses": support.suggest_responses(message),
        "should_suggest_assessment": support.should_offer_assessment(history, message),
        "homework": support.pick_homework(message, history),
        "emotions": support.detect_emotions(message),
        "is_crisis": False,
    })


@api_view(["GET", "POST"])
def assessment(request):
    if request.method == "GET":
        return JsonResponse({"questions": support.assessment_questions()})
    answers = parse_json(request).get('answers')
    if not isinstance(answers, dict):
        raise ApiError("answers must be an object mapping question ids to values")
    return JsonResponse(support.score_assessment(answers))


# ============================================================================
# SECTION 7: ANONYMOUS FEEDBACK
# ============================================================================

@api_view(["POST"])
def feedback_submit(request):
    feedback.submit(parse_json(request))
    return JsonResponse({"status": "success"}, status=201)


@api_view(["GET"], auth="admin")
def admin_feedback(request):
    rows = feedback.feedback_for(request.GET.get('timeframe', 'all'))
    return JsonResponse({"feedback": [serialize_feedback(f) for f in rows]})


@api_view(["GET"], auth="admin")
def admin_feedback_summary(request):
    rows = feedback.feedback_for(request.GET.get('timeframe', 'all'))
    return JsonResponse(feedback.summarize(rows))


@api_view(["GET"], auth="admin")
def admin_feedback_export(request):
    rows = feedback.feedback_for(request.GET.get('timeframe', 'all'))
    buffer = io.StringIO()
    feedback.write_csv(rows, buffer)
    response = HttpResponse(buffer.getvalue(), content_type='text/csv; charset=utf-8')
    filename = f"feedback_export_{timezone.localdate().isoformat()}.csv"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


# ============================================================================
# SECTION 8: MODERATION CONSOLE
# ============================================================================

@api_view(["GET"], auth="moderator")
def admin_posts(request):
    status = request.GET.get('status')
    limit = parse_int(request.GET.get('limit'), 'limit', 50, minimum=1, maximum=200)
    offset = parse_int(request.GET.get('offset'), 'offset', 0)

    qs = Post.objects.select_related('author')
    if status and status != 'all':
        if status not in CONTENT_STATUSES:
            raise ApiError(f"status must be one of: {', '.join(CONTENT_STATUSES)}")
        qs = qs.filter(status=status)
    total = qs.count()
    page = list(qs.annotate(comment_count=Count('comments')).order_by('-created_at')[offset:offset + limit])
    counts, _ = reactions.summarize('post', [p.id for p in page])
    return JsonResponse({
        "posts": [
            serialize_post(p, request.user, counts[p.id], None, p.comment_count, include_author=True)
            for p in page
        ],
        "total": total,
        "limit": limit,
        "offset": offset,
    })


@api_view(["GET", "PUT", "DELETE"], auth="moderator")
def admin_post_detail(request, post_id):
    post = get_object_or_404(Post.objects.select_related('author'), id=post_id)

    if request.method == "DELETE":
        if request.GET.get('hard', '').lower() == 'true':
            post.delete()
            logger.info(f"Moderator {request.user.id} hard-deleted post {post_id}")
            return JsonResponse({"message": "Post permanently deleted"})
        post.moderate('deleted', request.user, "Post deleted by admin")
        logger.info(f"Moderator {request.user.id} soft-deleted post {post.id}")
        return JsonResponse({"message": "Post deleted"})

    if request.method == "PUT":
        data = parse_json(request)
        status = data.get('status')
        if 'status' in data and status not in CONTENT_STATUSES:
            raise ApiError(f"status must be one of: {', '.join(CONTENT_STATUSES)}")
        for field in ('title', 'content'):
            if field in data:
                value = _text(data, field, max_length=200 if field == 'title' else None)
                if not value:
                    raise ApiError(f"{field} cannot be empty")
                setattr(post, field, value)
        if 'category' in data:
            post.category = _text(data, 'category', max_length=50) or 'general'
        if 'is_anonymous' in data:
            post.is_anonymous = _flag(data, 'is_anonymous', True)
            if post.is_anonymous and not post.anonymous_username:
                post.anonymous_username = generate_username()
        reason = None
        if 'status' in data:
            reason = _text(data, 'moderation_reason') or _text(data, 'reason')
            if status == 'moderated':
                reason = reason or "Content moderated by admin"
            elif status == 'deleted':
                reason = reason or "Post deleted by admin"

        with transaction.atomic():
            post.save()
            if 'status' in data:
                post.moderate(status, request.user, reason)
        if 'status' in data:
            logger.info(f"Moderator {request.user.id} set post {post.id} to {status}")

    comments = list(post.comments.select_related('author').order_by('created_at'))
    counts, _ = reactions.summarize('post', [post.id])
    payload = serialize_post(post, request.user, counts[post.id], None, len(comments), include_author=True)
    payload["comments"] = [serialize_comment(c, request.user, include_author=True) for c in comments]
    payload["reactions"] = [serialize_reaction(r) for r in post.reactions.order_by('created_at')]
    payload["reports"] = [serialize_report(r) for r in post.reports.select_related('reporter', 'reviewed_by')]
    return JsonResponse(payload)


@api_view(["POST"], auth="moderator")
def admin_moderate_comment(request, comment_id):
    comment = get_object_or_404(Comment.objects.select_related('author'), id=comment_id)
    data = parse_json(request)
    status = data.get('status')
    if status not in ('moderated', 'deleted'):
        raise ApiError("status must be 'moderated' or 'deleted'")
    reason = _text(data, 'reason') or "Comment moderated by admin"
    comment.moderate(status, request.user, reason)
    logger.info(f"Moderator {request.user.id} set comment {comment.id} to {status}")
    return JsonResponse(serialize_comment(comment, request.user, include_author=True))


@api_view(["GET"], auth="moderator")
def admin_moderation(request):
    flagged = ('moderated', 'deleted')
    posts_qs = Post.objects.filter(status__in=flagged).select_related('author').order_by('-moderated_at', '-created_at')
    comments_qs = Comment.objects.filter(status__in=flagged).select_related('author').order_by('-moderated_at', '-created_at')
    pending = Report.objects.filter(status='pending').select_related('reporter', 'reviewed_by')
    return JsonResponse({
        "posts": [serialize_post(p, request.user, include_author=True) for p in posts_qs],
        "comments": [serialize_comment(c, request.user, include_author=True) for c in comments_qs],
        "reports": [serialize_report(r) for r in pending],
    })


@api_view(["GET"], auth="moderator")
def admin_reports(request):
    qs = Report.objects.select_related('reporter', 'reviewed_by')
    status = request.GET.get('status')
    if status and status != 'all':
        if status not in REPORT_STATUSES:
            raise ApiError(f"status must be one of: {', '.join(REPORT_STATUSES)}")
        qs = qs.filter(status=status)
    return JsonResponse({"reports": [serialize_report(r) for r in qs]})


@api_view(["PUT"], auth="moderator")
def admin_report_detail(request, report_id):
    report = get_object_or_404(Report.objects.select_related('reporter'), id=report_id)
    data = parse_json(request)
    status = data.get('status')
    if status not in REPORT_STATUSES:
        raise ApiError(f"status must be one of: {', '.join(REPORT_STATUSES)}")
    report.status = status
    report.reviewed_by = request.user
    report.reviewed_at = timezone.now()
    reason = _text(data, 'reason')
    if reason:
        report.description = reason
    report.save()
    logger.info(f"Moderator {request.user.id} marked report {report.id} as {status}")
    return JsonResponse(serialize_report(report))
