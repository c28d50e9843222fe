"""Social feed: posts, comments, likes and the notifications they raise."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..errors import NotFound
from ..models import Comment, Notification, Post, PostLike, User
from .accounts import find_account, require_user

logger = logging.getLogger(__name__)


def _require_post(db: Session, post_id: str) -> Post:
    post = db.get(Post, post_id.strip().lower())
    if post is None:
        raise NotFound("POST_NOT_FOUND", "Post not found")
    return post


def _notify(db: Session, recipient_pk: str, post: Post, content: str) -> None:
    db.add(Notification(user_pk=recipient_pk, post_pk=post.id, content=content, is_read=False))


def create_post(db: Session, user_id: int, content: str, media: Optional[str] = None) -> Post:
    user = require_user(db, user_id)
    post = Post(user=user, content=content, media=media)
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("User %s published post %s", user_id, post.id)
    return post


def add_comment(db: Session, user_id: int, post_id: str, content: str) -> Comment:
    user = require_user(db, user_id)
    post = _require_post(db, post_id)

    comment = Comment(user=user, post=post, content=content)
    db.add(comment)
    _notify(db, post.user_pk, post, f"{user.name} commented on your post")
    db.commit()
    db.refresh(comment)
    return comment


def toggle_like(db: Session, user_id: int, post_id: str) -> tuple[bool, int]:
    """Like the post, or take the like back if it is already there.

    Returns ``(liked, like_count)`` after the change.
    """
    user = require_user(db, user_id)
    post = _require_post(db, post_id)

    existing = db.scalar(select(PostLike).where(PostLike.post_pk == post.id, PostLike.user_pk == user.id))
    if existing is not None:
        db.delete(existing)
        liked = False
    else:
        db.add(PostLike(post=post, user=user))
        _notify(db, post.user_pk, post, f"{user.name} liked your post")
        liked = True
    db.commit()
    db.refresh(post)
    return liked, len(post.likes)


def get_post(db: Session, post_id: str) -> Post:
    return _require_post(db, post_id)


def list_feed(db: Session, viewer_id: int) -> tuple[list[Post], Optional[User]]:
    """All posts, newest first, along with the viewing user (if known)."""
    viewer = find_account(db, "user", viewer_id)
    posts = db.scalars(
        select(Post)
        .options(
            selectinload(Post.user),
            selectinload(Post.comments).selectinload(Comment.user),
            selectinload(Post.likes),
        )
        .order_by(Post.created_at.desc())
    ).all()
    return list(posts), viewer


def unread_notifications(db: Session, user_id: int) -> list[Notification]:
    user = require_user(db, user_id)
    query = (
        select(Notification)
        .where(Notification.user_pk == user.id, Notification.is_read.is_(False))
        .order_by(Notification.created_at)
    )
    return list(db.scalars(query).all())
