from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models import Post, User
from ..services import feed

router = APIRouter(prefix="/user", tags=["Feed"])


def _post_out(post: Post, viewer: Optional[User] = None) -> schemas.PostOut:
    return schemas.PostOut(
        post_id=post.id,
        user_id=post.user.user_id,
        user_name=post.user.name,
        user_image=post.user.profile_picture,
        content=post.content,
        image=post.media,
        created_at=post.created_at,
        comments=[
            schemas.CommentOut(
                comment_id=comment.id,
                user_id=comment.user.user_id,
                user_name=comment.user.name,
                user_image=comment.user.profile_picture,
                content=comment.content,
                created_at=comment.created_at,
            )
            for comment in post.comments
        ],
        likes=len(post.likes),
        liked=viewer is not None and any(like.user_pk == viewer.id for like in post.likes),
    )


@router.post("/feed/post", response_model=schemas.PostCreated, status_code=status.HTTP_201_CREATED)
def create_post(body: schemas.PostCreate, db: Session = Depends(get_db)):
    post = feed.create_post(db, body.user_id, body.content, body.media)
    return schemas.PostCreated(post_id=post.id)


@router.post("/feed/comment", response_model=schemas.CommentCreated, status_code=status.HTTP_201_CREATED)
def add_comment(body: schemas.CommentCreate, db: Session = Depends(get_db)):
    comment = feed.add_comment(db, body.user_id, body.post_id, body.content)
    return schemas.CommentCreated(comment_id=comment.id)


@router.post("/feed/like", response_model=schemas.LikeResult)
def toggle_like(body: schemas.LikeToggle, db: Session = Depends(get_db)):
    liked, likes = feed.toggle_like(db, body.user_id, body.post_id)
    return schemas.LikeResult(liked=liked, likes=likes)


@router.get("/feed/all/{user_id}", response_model=List[schemas.PostOut])
def full_feed(user_id: int, db: Session = Depends(get_db)):
    posts, viewer = feed.list_feed(db, user_id)
    return [_post_out(post, viewer) for post in posts]


@router.get("/feed/{post_id}", response_model=schemas.PostOut)
def single_post(post_id: str, db: Session = Depends(get_db)):
    return _post_out(feed.get_post(db, post_id))


@router.get("/notifications/all/{user_id}", response_model=List[schemas.FeedNotification])
def unread_notifications(user_id: int, db: Session = Depends(get_db)):
    return [
        schemas.FeedNotification(
            notification_id=item.id,
            content=item.content,
            created_at=item.created_at,
            post_id=item.post_pk,
        )
        for item in feed.unread_notifications(db, user_id)
    ]
