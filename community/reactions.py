"""
Reaction counting and toggling for posts and comments.

Upvotes, hearts and hugs all live in the Reaction table; a comment upvote
is just a Reaction with reaction_type='upvote'.
"""

from django.db import IntegrityError, transaction
from django.db.models import Count

from .models import Reaction

REACTION_TYPES = ('upvote', 'heart', 'hug')

# reaction_type -> key used in reaction_counts
COUNT_KEYS = {
    'upvote': 'upvotes',
    'heart': 'hearts',
    'hug': 'hugs',
}


def empty_counts():
    return {key: 0 for key in COUNT_KEYS.values()}


def empty_user_reactions():
    return {reaction_type: False for reaction_type in REACTION_TYPES}


def summarize(field, ids, viewer=None):
    """
    Count reactions for many targets in two queries.

    Args:
        field: 'post' or 'comment'
        ids: target primary keys
        viewer: request.user; anonymous viewers get all-False user reactions

    Returns:
        (counts, mine): dicts keyed by target id holding reaction_counts and
        user_reactions respectively.
    """
    ids = list(ids)
    counts = {pk: empty_counts() for pk in ids}
    mine = {pk: empty_user_reactions() for pk in ids}
    if not ids:
        return counts, mine

    target = f"{field}_id"
    rows = (
        Reaction.objects.filter(**{f"{target}__in": ids})
        .values(target, 'reaction_type')
        .annotate(total=Count('id'))
        .order_by()
    )
    for row in rows:
        counts[row[target]][COUNT_KEYS[row['reaction_type']]] = row['total']

    if viewer is not None and viewer.is_authenticated:
        own = Reaction.objects.filter(user=viewer, **{f"{target}__in": ids})
        for pk, reaction_type in own.values_list(target, 'reaction_type'):
            mine[pk][reaction_type] = True
    return counts, mine


def toggle(user, reaction_type, post=None, comment=None):
    """
    Add the reaction if missing, remove it if present.

    Returns 'added' or 'removed'.
    """
    existing = Reaction.objects.filter(user=user, reaction_type=reaction_type, post=post, comment=comment)
    if existing.exists():
        existing.delete()
        return 'removed'
    add(user, reaction_type, post=post, comment=comment)
    return 'added'


def add(user, reaction_type, post=None, comment=None):
    """Create the reaction; a duplicate is a no-op. Returns True if created."""
    try:
        with transaction.atomic():
            Reaction.objects.create(user=user, reaction_type=reaction_type, post=post, comment=comment)
    except IntegrityError:
        return False
    return True


def remove(user, reaction_type, post=None, comment=None):
    deleted, _ = Reaction.objects.filter(
        user=user, reaction_type=reaction_type, post=post, comment=comment
    ).delete()
    return deleted > 0
