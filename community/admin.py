import logging

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import Group
from django.urls import reverse
from django.utils import timezone
from django.utils.html import format_html

from .formatting import display_name
from .models import (
    User, UserRole, Post, Comment, Reaction, Report,
    ChatRoom, ChatRoomParticipant, ChatMessage, AnonymousFeedback,
)

logger = logging.getLogger(__name__)


def moderate_queryset(queryset, status, moderator, reason):
    """Apply a moderation status to every object; returns how many changed."""
    count = 0
    for obj in queryset:
        obj.moderate(status, moderator, reason)
        count += 1
    logger.info(f"Admin {moderator.id} set {count} {queryset.model.__name__} row(s) to {status}")
    return count


def review_reports(queryset, status, reviewer):
    return queryset.update(status=status, reviewed_by=reviewer, reviewed_at=timezone.now())


def _short(text, length):
    if text:
        return text[:length] + '...' if len(text) > length else text
    return "(no content)"


class ModerationActionsMixin:
    """Moderate / restore / soft-delete actions shared by posts and comments."""

    actions = ['moderate_selected', 'restore_selected', 'soft_delete_selected']

    def moderate_selected(self, request, queryset):
        count = moderate_queryset(queryset, 'moderated', request.user, "Content moderated by admin")
        self.message_user(request, f"{count} item(s) moderated")
    moderate_selected.short_description = "Moderate selected (hide content)"

    def restore_selected(self, request, queryset):
        count = moderate_queryset(queryset, 'active', request.user, "")
        self.message_user(request, f"{count} item(s) restored")
    restore_selected.short_description = "Restore selected"

    def soft_delete_selected(self, request, queryset):
        count = moderate_queryset(queryset, 'deleted', request.user, "Deleted by admin")
        self.message_user(request, f"{count} item(s) deleted")
    soft_delete_selected.short_description = "Soft-delete selected"

    def author_link(self, obj):
        url = reverse("admin:community_user_change", args=[obj.author_id])
        return format_html('<a href="{}">{}</a>', url, obj.author.username)
    author_link.short_description = 'Author'
    author_link.admin_order_field = 'author__username'

    def shown_as(self, obj):
        return display_name(obj)
    shown_as.short_description = 'Shown as'


# ==================== ADMIN CLASSES ====================

class UserRoleInline(admin.StackedInline):
    model = UserRole
    fk_name = 'user'
    can_delete = True
    extra = 0
    readonly_fields = ('granted_by', 'granted_at')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'anonymous_username', 'role_name', 'online', 'is_staff', 'last_seen', 'date_joined')
    search_fields = ('username', 'anonymous_username')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Community', {'fields': ('anonymous_username', 'timezone', 'last_seen')}),
    )
    inlines = [UserRoleInline]
    actions = ['activate_users', 'deactivate_users']

    def role_name(self, obj):
        return obj.role
    role_name.short_description = 'Role'

    def online(self, obj):
        return obj.is_online
    online.short_description = 'Online'
    online.boolean = True

    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f"{count} users activated")
    activate_users.short_description = "Activate selected users"

    def deactivate_users(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f"{count} users deactivated")
    deactivate_users.short_description = "Deactivate selected users"


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ('user', 'role', 'granted_by', 'granted_at')
    list_filter = ('role',)
    search_fields = ('user__username',)
    readonly_fields = ('granted_by', 'granted_at')

    def save_model(self, request, obj, form, change):
        obj.granted_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(Post)
class PostAdmin(ModerationActionsMixin, admin.ModelAdmin):
    list_display = ('title', 'author_link', 'shown_as', 'category', 'status', 'created_at')
    list_filter = ('status', 'category', 'is_anonymous')
    search_fields = ('title', 'content', 'author__username', 'anonymous_username')
    readonly_fields = ('moderated_by', 'moderated_at', 'created_at', 'updated_at')


@admin.register(Comment)
class CommentAdmin(ModerationActionsMixin, admin.ModelAdmin):
    list_display = ('content_short', 'author_link', 'shown_as', 'post', 'status', 'created_at')
    list_filter = ('status', 'is_anonymous')
    search_fields = ('content', 'author__username', 'post__title')
    raw_id_fields = ('post', 'parent')
    readonly_fields = ('moderated_by', 'moderated_at', 'created_at', 'updated_at')

    def content_short(self, obj):
        return _short(obj.content, 50)
    content_short.short_description = 'Content'


@admin.register(Reaction)
class ReactionAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'reaction_type', 'post', 'comment', 'created_at')
    list_filter = ('reaction_type',)
    raw_id_fields = ('post', 'comment')


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ('reason', 'reporter', 'post', 'comment', 'status', 'reviewed_by', 'created_at')
    list_filter = ('status',)
    search_fields = ('reason', 'description', 'reporter__username')
    raw_id_fields = ('post', 'comment')
    actions = ['resolve_reports', 'dismiss_reports']

    def resolve_reports(self, request, queryset):
        count = review_reports(queryset, 'resolved', request.user)
        self.message_user(request, f"{count} reports resolved")
    resolve_reports.short_description = "Mark selected reports resolved"

    def dismiss_reports(self, request, queryset):
        count = review_reports(queryset, 'dismissed', request.user)
        self.message_user(request, f"{count} reports dismissed")
    dismiss_reports.short_description = "Dismiss selected reports"


class ParticipantInline(admin.TabularInline):
    model = ChatRoomParticipant
    extra = 0
    readonly_fields = ('username', 'is_online', 'last_seen')


@admin.register(ChatRoom)
class ChatRoomAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'is_private', 'room_code', 'is_active', 'participant_count', 'created_at')
    list_filter = ('is_active', 'is_private', 'category')
    search_fields = ('name', 'description', 'room_code')
    inlines = [ParticipantInline]

    def participant_count(self, obj):
        return obj.participants.count()
    participant_count.short_description = 'Participants'


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ('room', 'username', 'content_short', 'is_system', 'created_at')
    list_filter = ('is_system', 'created_at')
    search_fields = ('content', 'username', 'room__name')

    def content_short(self, obj):
        return _short(obj.content, 50)
    content_short.short_description = 'Content'


@admin.register(AnonymousFeedback)
class AnonymousFeedbackAdmin(admin.ModelAdmin):
    list_display = ('submission_date', 'satisfaction_rating', 'usage_frequency', 'feature_request_short')
    list_filter = ('satisfaction_rating', 'usage_frequency', 'submission_date')
    readonly_fields = ('feedback_id', 'submission_date')

    def feature_request_short(self, obj):
        return _short(obj.feature_request, 60)
    feature_request_short.short_description = 'Feature request'


# Unregister Django's default Group
admin.site.unregister(Group)

# Basic admin site configuration
admin.site.site_header = "Safe Space Moderation"
admin.site.site_title = "Safe Space Admin Portal"
admin.site.index_title = "Community moderation"
