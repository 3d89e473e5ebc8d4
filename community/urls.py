"""
================================================================================
SAFE SPACE - URL CONFIGURATION
================================================================================

@file        urls.py
@description JSON API routing for the community app (mounted under /api/)

URL STRUCTURE OVERVIEW
================================================================================
1. Authentication & Roles   (auth/*, user/role, admin/roles)
2. Posts                    (posts, posts/<id>)
3. Comments                 (comments, comments/<id>, upvote, reactions)
4. Reactions & Reports      (reactions, reports)
5. Chat Rooms               (chat/rooms/...)
6. AI Support               (ai-chat, assessment)
7. Anonymous Feedback       (feedback, admin/feedback/...)
8. Moderation Console       (admin/posts, admin/comments, admin/reports)

URL PARAMETER TYPES
================================================================================
- <uuid:...>: Post, Comment, Report and ChatRoom ids are UUIDs; anything
  else 404s before reaching a view
- <str:code>: 6 character private room code (case-insensitive)

Collection routes have no trailing slash: /api/posts, /api/posts/<id>.

================================================================================
"""

from django.urls import path
from . import views


urlpatterns = [

    # ========================================================================
    # SECTION 1: AUTHENTICATION & ROLES
    # ========================================================================

    path("auth/register", views.register, name="register"),
    path("auth/login", views.login_view, name="login"),
    path("auth/logout", views.logout_view, name="logout"),
    path("auth/me", views.me, name="me"),
    path("user/role", views.user_role, name="user_role"),
    path("admin/roles", views.admin_roles, name="admin_roles"),  # Admin only

    # ========================================================================
    # SECTION 2: POSTS
    # ========================================================================

    path("posts", views.posts, name="posts"),  # List / create
    path("posts/<uuid:post_id>", views.post_detail, name="post_detail"),  # Read / edit / soft delete

    # ========================================================================
    # SECTION 3: COMMENTS
    # ========================================================================

    path("comments", views.comments, name="comments"),  # ?post_id=&view=thread|chat
    path("comments/<uuid:comment_id>", views.comment_detail, name="comment_detail"),
    path("comments/<uuid:comment_id>/upvote", views.comment_upvote, name="comment_upvote"),
    path("comments/<uuid:comment_id>/reactions", views.comment_reactions, name="comment_reactions"),

    # ========================================================================
    # SECTION 4: REACTIONS & REPORTS
    # ========================================================================

    path("reactions", views.reactions_view, name="reactions"),
    path("reports", views.reports, name="reports"),

    # ========================================================================
    # SECTION 5: CHAT ROOMS
    # ========================================================================

    path("chat/rooms", views.rooms, name="rooms"),
    path("chat/rooms/code/<str:code>", views.room_by_code, name="room_by_code"),
    path("chat/rooms/<uuid:room_id>", views.room_detail, name="room_detail"),
    path("chat/rooms/<uuid:room_id>/join", views.room_join, name="room_join"),
    path("chat/rooms/<uuid:room_id>/leave", views.room_leave, name="room_leave"),
    path("chat/rooms/<uuid:room_id>/heartbeat", views.room_heartbeat, name="room_heartbeat"),
    path("chat/rooms/<uuid:room_id>/participants", views.room_participants, name="room_participants"),
    path("chat/rooms/<uuid:room_id>/messages", views.room_messages, name="room_messages"),  # ?after= polling

    # ========================================================================
    # SECTION 6: AI SUPPORT
    # ========================================================================

    path("ai-chat", views.ai_chat, name="ai_chat"),
    path("assessment", views.assessment, name="assessment"),

    # ========================================================================
    # SECTION 7: ANONYMOUS FEEDBACK
    # ========================================================================

    path("feedback", views.feedback_submit, name="feedback"),
    path("admin/feedback", views.admin_feedback, name="admin_feedback"),
    path("admin/feedback/summary", views.admin_feedback_summary, name="admin_feedback_summary"),
    path("admin/feedback/export", views.admin_feedback_export, name="admin_feedback_export"),  # CSV

    # ========================================================================
    # SECTION 8: MODERATION CONSOLE
    # ========================================================================

    path("admin/posts", views.admin_posts, name="admin_posts"),
    path("admin/posts/<uuid:post_id>", views.admin_post_detail, name="admin_post_detail"),
    path("admin/comments/<uuid:comment_id>/moderate", views.admin_moderate_comment, name="admin_moderate_comment"),
    path("admin/moderation", views.admin_moderation, name="admin_moderation"),
    path("admin/reports", views.admin_reports, name="admin_reports"),
    path("admin/reports/<uuid:report_id>", views.admin_report_detail, name="admin_report_detail"),
]
