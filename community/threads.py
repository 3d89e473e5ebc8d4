"""
Comment threading.

One dataset feeds two views of the same discussion:

    thread  nested tree, replies under their parent
    chat    flat chronological list, each item pointing at its parent

Tree rules
    - input rows arrive ordered by created_at ascending, children keep
      that order
    - a comment whose parent is missing from the rows becomes a root
    - a deleted comment is dropped unless some descendant is still shown,
      in which case it stays as a "[deleted]" tombstone
    - depth counts from 0 at the roots; replies are allowed while
      depth < max_depth and nodes start collapsed from COLLAPSE_DEPTH down
"""

from django.conf import settings

from .serializers import serialize_comment, tombstone

COLLAPSE_DEPTH = 2


def _children_index(comments):
    by_id = {c.id: c for c in comments}
    children = {}
    roots = []
    for comment in comments:
        if comment.parent_id and comment.parent_id in by_id and comment.parent_id != comment.id:
            children.setdefault(comment.parent_id, []).append(comment)
        else:
            roots.append(comment)
    return roots, children


def _visible_ids(roots, children):
    """Ids of comments that survive pruning (non-deleted, or anchoring a survivor)."""
    visible = set()

    def walk(comment):
        keep = comment.status != 'deleted'
        for child in children.get(comment.id, ()):
            if walk(child):
                keep = True
        if keep:
            visible.add(comment.id)
        return keep

    for root in roots:
        walk(root)
    return visible


def build_comment_tree(comments, viewer=None, counts=None, mine=None, max_depth=None):
    """
    Nest comments into a list of root nodes.

    Args:
        comments: Comment rows ordered by created_at ascending
        viewer: request.user, used for is_author / user_reactions
        counts, mine: per-comment reaction summaries from reactions.summarize
        max_depth: deepest depth that may receive replies
                   (defaults to settings.COMMENT_MAX_DEPTH)

    Each node is the serialized comment plus depth, children, reply_count,
    can_reply and collapsed.
    """
    comments = list(comments)
    counts = counts or {}
    mine = mine or {}
    if max_depth is None:
        max_depth = settings.COMMENT_MAX_DEPTH

    roots, children = _children_index(comments)
    visible = _visible_ids(roots, children)

    def build(comment, depth):
        node = serialize_comment(comment, viewer, counts.get(comment.id), mine.get(comment.id))
        if comment.status == 'deleted':
            tombstone(node)
        node["children"] = [
            build(child, depth + 1)
            for child in children.get(comment.id, ())
            if child.id in visible
        ]
        node["depth"] = depth
        node["reply_count"] = sum(1 + child["reply_count"] for child in node["children"])
        node["can_reply"] = depth < max_depth and comment.status != "deleted"
        node["collapsed"] = depth >= COLLAPSE_DEPTH
        return node

    return [build(root, 0) for root in roots if root.id in visible]


def flatten_comment_tree(tree):
    """
    Chat view: every node of the tree in chronological order.

    Each item keeps parent_id and gains reply_to, the display name of the
    comment it answers. Promoted orphans lose their parent_id.
    """
    items = []

    def walk(node, parent):
        item = {k: v for k, v in node.items() if k != "children"}
        item["parent_id"] = parent["id"] if parent else None
        item["reply_to"] = parent["author"]["username"] if parent else None
        items.append(item)
        for child in node["children"]:
            walk(child, node)

    for root in tree:
        walk(root, None)
    items.sort(key=lambda item: item["created_at"])
    return items

