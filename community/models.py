"""
================================================================================
SAFE SPACE - DATABASE MODELS
================================================================================

@file        models.py
@description Django ORM models defining the complete database schema
@version     1.0.0

MODULE PURPOSE
================================================================================
This module defines all database models for the Safe Space peer-support
platform:
- User model (extended from AbstractUser) and moderation roles
- Forum posts with threaded comments
- Reactions (upvote / heart / hug) and content reports
- Chat rooms, participants and messages
- Anonymous feedback submissions

DATABASE STRUCTURE
================================================================================
1. User & Roles
   - User (AbstractUser extension)
   - UserRole (OneToOne with User)

2. Forum Content
   - Post (user-generated content, soft-deletable)
   - Comment (nested replies through parent FK)

3. Engagement & Safety
   - Reaction (exactly one of post/comment)
   - Report (flag raised against a post or comment)

4. Chat
   - ChatRoom
   - ChatRoomParticipant (presence tracking)
   - ChatMessage

5. Feedback
   - AnonymousFeedback (no link to any user)

MODEL RELATIONSHIPS
================================================================================
User (1) ──────> (N) Post
User (1) ──────> (N) Comment
User (1) ──────> (1) UserRole
Post (1) ──────> (N) Comment
Comment (1) ────> (N) Comment (nested replies)
Post/Comment (1) ──> (N) Reaction, Report
ChatRoom (1) ──> (N) ChatRoomParticipant, ChatMessage

ANONYMITY
================================================================================
Posts and comments default to anonymous. The author FK is kept for ownership
checks but is never serialized for anonymous content; a generated handle is
shown instead. AnonymousFeedback has no user FK at all and stores only the
submission date.

================================================================================
"""

import uuid
from datetime import timedelta

import pytz
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import Q
from django.utils import timezone as dj_timezone


# ============================================================================
# CONSTANTS & CHOICES
# ============================================================================

TIMEZONE_CHOICES = [(tz, tz) for tz in pytz.all_timezones]

CONTENT_STATUS_CHOICES = [
    ('active', 'Active'),
    ('moderated', 'Moderated'),
    ('deleted', 'Deleted'),
]

ROLE_CHOICES = [
    ('user', 'User'),
    ('moderator', 'Moderator'),
    ('admin', 'Admin'),
]

REACTION_CHOICES = [
    ('upvote', 'Upvote'),
    ('heart', 'Heart'),
    ('hug', 'Hug'),
]

REPORT_STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('reviewed', 'Reviewed'),
    ('resolved', 'Resolved'),
    ('dismissed', 'Dismissed'),
]

SATISFACTION_CHOICES = [
    ('very_satisfied', 'Very Satisfied'),
    ('satisfied', 'Satisfied'),
    ('neutral', 'Neutral'),
    ('dissatisfied', 'Dissatisfied'),
    ('very_dissatisfied', 'Very Dissatisfied'),
]

USAGE_FREQUENCY_CHOICES = [
    ('daily', 'Multiple times a day'),
    ('few_times_week', 'A few times a week'),
    ('weekly', 'About once a week'),
    ('monthly', 'A few times a month'),
    ('rarely', 'Rarely'),
    ('first_time', 'This is my first time'),
]

FEATURE_RATING_CHOICES = [
    ('excellent', 'Excellent'),
    ('good', 'Good'),
    ('average', 'Average'),
    ('poor', 'Needs Improvement'),
    ('not_used', 'Not Used'),
]

POST_CATEGORIES = [
    'Depression Help',
    'Career Stress',
    'Relationship Advice',
    'General Support',
]

MODERATOR_ROLES = ('moderator', 'admin')


# ============================================================================
# SECTION 1: USER & ROLE MODELS
# ============================================================================

class User(AbstractUser):
    """
    Extended User model for the peer-support community.

    Attributes:
        anonymous_username (CharField): Generated handle shown on anonymous content
        timezone (CharField): User's preferred timezone
        last_seen (DateTimeField): Last activity timestamp

    Properties:
        is_online: True if user was active in last 5 minutes
        role: Effective moderation role ('user', 'moderator' or 'admin')
    """

    anonymous_username = models.CharField(
        max_length=50,
        blank=True,
        help_text="Generated handle used on anonymous posts and in chat"
    )
    timezone = models.CharField(
        max_length=100,
        choices=TIMEZONE_CHOICES,
        default='UTC',
        help_text="User's preferred timezone for display"
    )
    last_seen = models.DateTimeField(
        null=True,
        blank=True,
        default=dj_timezone.now,
        help_text="Last activity timestamp for online status"
    )

    @property
    def is_online(self):
        if not self.last_seen:
            return False
        return dj_timezone.now() - self.last_seen < timedelta(minutes=5)

    @property
    def role(self):
        """
        Effective role of this user.

        Superusers are always admins. Users without a UserRole row are
        regular users.
        """
        if self.is_superuser:
            return 'admin'
        try:
            return self.user_role.role
        except UserRole.DoesNotExist:
            return 'user'

    @property
    def is_moderator(self):
        return self.role in MODERATOR_ROLES

    @property
    def is_admin_role(self):
        return self.role == 'admin'


class UserRole(models.Model):
    """
    Moderation role granted to a user.

    Example:
        UserRole.objects.update_or_create(
            user=target,
            defaults={'role': 'moderator', 'granted_by': request.user}
        )
    """

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='user_role',
        help_text="User this role belongs to"
    )
    role = models.CharField(
        max_length=10,
        choices=ROLE_CHOICES,
        default='user',
        help_text="Moderation role"
    )
    granted_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='granted_roles',
        help_text="Admin who granted this role"
    )
    granted_at = models.DateTimeField(
        auto_now=True,
        help_text="When the role was last granted"
    )

    def __str__(self):
        return f"{self.user} ({self.role})"


# ============================================================================
# SECTION 2: FORUM CONTENT MODELS
# ============================================================================

class ModeratedContent(models.Model):
    """
    Shared fields for content that moderators can hide or soft-delete.
    """

    status = models.CharField(
        max_length=10,
        choices=CONTENT_STATUS_CHOICES,
        default='active',
        db_index=True,
        help_text="Visibility status"
    )
    moderation_reason = models.TextField(
        blank=True,
        help_text="Why the content was moderated"
    )
    moderated_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="Moderator who last changed the status"
    )
    moderated_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the status was last changed by a moderator"
    )

    class Meta:
        abstract = True

    def moderate(self, status, moderator, reason):
        self.status = status
        self.moderated_by = moderator
        self.moderated_at = dj_timezone.now()
        self.moderation_reason = reason
        self.save(update_fields=['status', 'moderated_by', 'moderated_at', 'moderation_reason', 'updated_at'])


class Post(ModeratedContent):
    """
    Forum post.

    Attributes:
        author (ForeignKey): Post owner (never exposed for anonymous posts)
        title (CharField): Post title
        content (TextField): Post body
        category (CharField): Free-form category, e.g. 'Career Stress'
        is_anonymous (BooleanField): Show handle instead of username
        anonymous_username (CharField): Handle displayed for anonymous posts

    Related Names:
        comments: QuerySet of Comment objects
        reactions: QuerySet of Reaction objects
        reports: QuerySet of Report objects

    Meta:
        ordering: Newest first
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='posts',
        help_text="Author of this post"
    )
    title = models.CharField(
        max_length=200,
        help_text="Post title"
    )
    content = models.TextField(
        help_text="Post text content"
    )
    category = models.CharField(
        max_length=50,
        default='general',
        db_index=True,
        help_text="Post category"
    )
    is_anonymous = models.BooleanField(
        default=True,
        help_text="Hide author identity behind a generated handle"
    )
    anonymous_username = models.CharField(
        max_length=50,
        blank=True,
        help_text="Handle shown for anonymous posts"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Last edit timestamp"
    )

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title[:50]} ({self.status})"


class Comment(ModeratedContent):
    """
    Comment on a post with optional nested replies.

    Example:
        root = Comment.objects.create(author=user, post=post, content="Same here")
        reply = Comment.objects.create(
            author=other_user,
            post=post,
            content="You're not alone",
            parent=root
        )
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name='comments',
        help_text="Post being commented on"
    )
    parent = models.ForeignKey(
        'self',
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name='replies',
        help_text="Parent comment for nested replies"
    )
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='comments',
        help_text="Comment author"
    )
    content = models.TextField(
        help_text="Comment text content"
    )
    is_anonymous = models.BooleanField(
        default=True,
        help_text="Hide author identity behind a generated handle"
    )
    anonymous_username = models.CharField(
        max_length=50,
        blank=True,
        help_text="Handle shown for anonymous comments"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Last edit timestamp"
    )

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"{self.content[:50]} ({self.status})"

    @property
    def depth(self):
        """Number of ancestors above this comment (root comments are 0)."""
        depth = 0
        current = self
        while current.parent_id:
            depth += 1
            current = current.parent
        return depth


# ============================================================================
# SECTION 3: ENGAGEMENT & SAFETY MODELS
# ============================================================================

class Reaction(models.Model):
    """
    A user's reaction on exactly one post or comment.

    Upvotes on comments are stored here with reaction_type='upvote'.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='reactions',
        help_text="User who reacted"
    )
    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='reactions',
        help_text="Post reacted to"
    )
    comment = models.ForeignKey(
        Comment,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='reactions',
        help_text="Comment reacted to"
    )
    reaction_type = models.CharField(
        max_length=10,
        choices=REACTION_CHOICES,
        help_text="Kind of reaction"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(post__isnull=False, comment__isnull=True) |
                    Q(post__isnull=True, comment__isnull=False)
                ),
                name='reaction_single_target',
            ),
            models.UniqueConstraint(
                fields=['user', 'post', 'reaction_type'],
                condition=Q(post__isnull=False),
                name='unique_post_reaction',
            ),
            models.UniqueConstraint(
                fields=['user', 'comment', 'reaction_type'],
                condition=Q(comment__isnull=False),
                name='unique_comment_reaction',
            ),
        ]

    def __str__(self):
        target = f"post {self.post_id}" if self.post_id else f"comment {self.comment_id}"
        return f"{self.user} {self.reaction_type} {target}"


class Report(models.Model):
    """
    Flag raised by a member against a post or comment.

    Reports start 'pending' and are reviewed from the moderation console.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reporter = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='reports_filed',
        help_text="User who filed the report"
    )
    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='reports',
        help_text="Reported post"
    )
    comment = models.ForeignKey(
        Comment,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='reports',
        help_text="Reported comment"
    )
    reason = models.CharField(
        max_length=100,
        help_text="Short reason, e.g. 'harassment'"
    )
    description = models.TextField(
        blank=True,
        help_text="Free-text details or reviewer notes"
    )
    status = models.CharField(
        max_length=10,
        choices=REPORT_STATUS_CHOICES,
        default='pending',
        db_index=True,
        help_text="Review status"
    )
    reviewed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reports_reviewed',
        help_text="Moderator who reviewed the report"
    )
    reviewed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Review timestamp"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Report {self.id} ({self.status}): {self.reason}"


# ============================================================================
# SECTION 4: CHAT MODELS
# ============================================================================

class ChatRoom(models.Model):
    """
    Topic-based group chat room.

    Private rooms are reachable only through their room_code.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=100,
        help_text="Room name"
    )
    description = models.TextField(
        blank=True,
        help_text="What the room is about"
    )
    category = models.CharField(
        max_length=50,
        blank=True,
        help_text="Room category"
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_rooms',
        help_text="User who created the room"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )
    max_users = models.PositiveIntegerField(
        default=50,
        help_text="Maximum simultaneous participants"
    )
    is_private = models.BooleanField(
        default=False,
        help_text="Hidden from the room list; joinable by code"
    )
    room_code = models.CharField(
        max_length=6,
        unique=True,
        null=True,
        blank=True,
        help_text="Share code for private rooms"
    )
    is_active = models.BooleanField(
        default=True,
        help_text="False once the room is closed"
    )

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class ChatRoomParticipant(models.Model):
    """
    Presence record of a user inside a room.

    last_seen is refreshed by heartbeats; participants whose heartbeat is
    older than CHAT_PRESENCE_TIMEOUT are treated as offline.
    """

    room = models.ForeignKey(
        ChatRoom,
        on_delete=models.CASCADE,
        related_name='participants',
        help_text="Room joined"
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='room_participations',
        help_text="Participating user"
    )
    username = models.CharField(
        max_length=50,
        help_text="Handle used in this room"
    )
    is_online = models.BooleanField(
        default=True,
        help_text="Currently in the room"
    )
    last_seen = models.DateTimeField(
        default=dj_timezone.now,
        help_text="Last heartbeat"
    )

    class Meta:
        unique_together = ('room', 'user')

    def __str__(self):
        return f"{self.username} in {self.room}"


class ChatMessage(models.Model):
    """
    Message posted in a chat room.

    System messages (joins/leaves) carry is_system=True and username 'System'.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(
        ChatRoom,
        on_delete=models.CASCADE,
        related_name='messages',
        help_text="Room this message belongs to"
    )
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='chat_messages',
        help_text="Sender"
    )
    username = models.CharField(
        max_length=50,
        help_text="Handle shown next to the message"
    )
    content = models.TextField(
        help_text="Message text"
    )
    is_system = models.BooleanField(
        default=False,
        help_text="Join/leave notices"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Creation timestamp"
    )

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"[{self.room_id}] {self.username}: {self.content[:30]}"


# ============================================================================
# SECTION 5: FEEDBACK MODELS
# ============================================================================

class AnonymousFeedback(models.Model):
    """
    Anonymous product feedback.

    There is deliberately no user FK; only the submission date (not time)
    is recorded.
    """

    feedback_id = models.UUIDField(
        default=uuid.uuid4,
        unique=True,
        editable=False,
        help_text="Random identifier not linked to any user"
    )
    submission_date = models.DateField(
        default=dj_timezone.localdate,
        db_index=True,
        help_text="Day of submission"
    )
    satisfaction_rating = models.CharField(
        max_length=20,
        choices=SATISFACTION_CHOICES,
        help_text="Overall satisfaction"
    )
    usage_frequency = models.CharField(
        max_length=20,
        choices=USAGE_FREQUENCY_CHOICES,
        help_text="How often the platform is used"
    )
    feature_rating = models.JSONField(
        default=dict,
        blank=True,
        help_text="Ratings keyed by feature: chat, aiSupport, community"
    )
    improvement_areas = models.JSONField(
        default=list,
        blank=True,
        help_text="Areas the respondent wants improved"
    )
    feature_request = models.CharField(
        max_length=500,
        blank=True,
        help_text="Requested feature"
    )
    general_feedback = models.TextField(
        max_length=1000,
        blank=True,
        help_text="Free-form feedback"
    )

    class Meta:
        ordering = ['-submission_date', '-id']

    def __str__(self):
        return f"Feedback {self.submission_date} ({self.satisfaction_rating})"
