"""
Chat room membership, presence and messages.

There is no socket layer. Clients poll ``messages?after=<timestamp>`` for
new messages and POST a heartbeat every 30 seconds; a participant whose
last heartbeat is older than CHAT_PRESENCE_TIMEOUT counts as offline even
if it never called leave.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone
from django.utils.crypto import get_random_string

from .errors import ApiError
from .models import ChatMessage, ChatRoom, ChatRoomParticipant
from .usernames import generate_username

logger = logging.getLogger(__name__)

ROOM_CODE_LENGTH = 6
ROOM_CODE_CHARS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'
SYSTEM_USERNAME = 'System'


def generate_room_code():
    while True:
        code = get_random_string(ROOM_CODE_LENGTH, ROOM_CODE_CHARS)
        if not ChatRoom.objects.filter(room_code=code).exists():
            return code


def presence_cutoff(now=None):
    return (now or timezone.now()) - timedelta(seconds=settings.CHAT_PRESENCE_TIMEOUT)


def online_filter(prefix=''):
    return Q(**{f'{prefix}is_online': True, f'{prefix}last_seen__gte': presence_cutoff()})


def active_participants(room):
    """Online participants with a fresh heartbeat, most recent first."""
    return room.participants.filter(online_filter()).order_by('-last_seen')


def with_active_users(rooms):
    """Annotate a ChatRoom queryset with ``active_users``."""
    return rooms.annotate(active_users=Count('participants', filter=online_filter('participants__')))


def create_room(user, name, description='', category='', max_users=50, is_private=False):
    room = ChatRoom(
        name=name,
        description=description,
        category=category,
        created_by=user,
        max_users=max_users,
        is_private=is_private,
    )
    if is_private:
        room.room_code = generate_room_code()
    room.save()
    logger.info(f"Chat room {room.id} created by user {user.id} (private={is_private})")
    return room


def close_room(room, user):
    if room.created_by_id != user.id and not user.is_moderator:
        raise ApiError("Only the room creator or a moderator can close this room", 403)
    room.is_active = False
    room.save(update_fields=['is_active'])
    room.participants.update(is_online=False)
    logger.info(f"Chat room {room.id} closed by user {user.id}")


def _system_message(room, user, text):
    return ChatMessage.objects.create(
        room=room,
        user=user,
        username=SYSTEM_USERNAME,
        content=text,
        is_system=True,
    )


def _is_present(participant):
    return participant.is_online and participant.last_seen >= presence_cutoff()


def join_room(room, user, username=None):
    """
    Put the user in the room and announce them.

    Rejoining while still present (e.g. a page reload) only refreshes the
    heartbeat and posts no announcement.

    Raises:
        ApiError(409): the room already holds max_users other people
    """
    with transaction.atomic():
        participant = (
            ChatRoomParticipant.objects.select_for_update()
            .filter(room=room, user=user).first()
        )
        already_present = participant is not None and _is_present(participant)

        if not already_present:
            others = active_participants(room).exclude(user=user).count()
            if others >= room.max_users:
                raise ApiError("Room is full", 409)

        handle = (username or '').strip()[:50] or (
            participant.username if participant else user.anonymous_username or generate_username()
        )
        if participant is None:
            try:
                with transaction.atomic():
                    participant = ChatRoomParticipant.objects.create(room=room, user=user, username=handle)
            except IntegrityError:
                participant = ChatRoomParticipant.objects.get(room=room, user=user)
        participant.username = handle
        participant.is_online = True
        participant.last_seen = timezone.now()
        participant.save(update_fields=['username', 'is_online', 'last_seen'])

        if not already_present:
            _system_message(room, user, f"{handle} joined the room")
    return participant


def leave_room(room, user):
    participant = ChatRoomParticipant.objects.filter(room=room, user=user).first()
    if participant is None:
        raise ApiError("You are not in this room", 404)
    if participant.is_online:
        participant.is_online = False
        participant.save(update_fields=['is_online'])
        _system_message(room, user, f"{participant.username} left the room")
    return participant


def heartbeat(room, user):
    updated = ChatRoomParticipant.objects.filter(room=room, user=user).update(
        is_online=True, last_seen=timezone.now()
    )
    if not updated:
        raise ApiError("Join the room first", 403)
    return ChatRoomParticipant.objects.get(room=room, user=user)


def recent_messages(room, after=None, limit=None):
    """
    The newest ``limit`` messages in ascending order.

    With ``after``, only messages created strictly later are returned.
    """
    limit = limit or settings.CHAT_HISTORY_LIMIT
    qs = room.messages.all()
    if after is not None:
        qs = qs.filter(created_at__gt=after)
    newest = list(qs.order_by('-created_at')[:limit])
    newest.reverse()
    return newest


def post_message(room, user, content):
    participant = ChatRoomParticipant.objects.filter(room=room, user=user).first()
    if participant is None:
        raise ApiError("Join the room first", 403)
    message = ChatMessage.objects.create(
        room=room,
        user=user,
        username=participant.username,
        content=content,
    )
    ChatRoomParticipant.objects.filter(pk=participant.pk).update(is_online=True, last_seen=timezone.now())
    return message
