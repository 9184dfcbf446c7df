import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import NotFoundError
from kampus.models.announcement import Announcement
from kampus.models.announcement_comment import AnnouncementComment
from kampus.models.announcement_like import AnnouncementLike
from kampus.models.student import Student
from kampus.schemas.announcement import (
    AnnouncementCommentCreate,
    AnnouncementCommentOut,
    AnnouncementCreate,
    AnnouncementOut,
    AnnouncementUpdate,
    LikeToggleOut,
)
from kampus.utils.timeslots import now_iso

logger = logging.getLogger("kampus.announcements")


def _announcement_query(db: Session):
    likes_sq = (
        db.query(AnnouncementLike.announcement_id.label("aid"), func.count().label("likes_count"))
        .group_by(AnnouncementLike.announcement_id)
        .subquery()
    )
    comments_sq = (
        db.query(AnnouncementComment.announcement_id.label("aid"), func.count().label("comments_count"))
        .group_by(AnnouncementComment.announcement_id)
        .subquery()
    )
    return (
        db.query(
            Announcement,
            func.coalesce(likes_sq.c.likes_count, 0),
            func.coalesce(comments_sq.c.comments_count, 0),
        )
        .outerjoin(likes_sq, likes_sq.c.aid == Announcement.id)
        .outerjoin(comments_sq, comments_sq.c.aid == Announcement.id)
    )


def _liked_ids(db: Session, student_id: int | None) -> set[int]:
    if student_id is None:
        return set()
    rows = db.query(AnnouncementLike.announcement_id).filter(AnnouncementLike.student_id == student_id).all()
    return {aid for (aid,) in rows}


def _to_out(row, liked: set[int]) -> AnnouncementOut:
    a, likes_count, comments_count = row
    out = AnnouncementOut.model_validate(a)
    out.likes_count = int(likes_count or 0)
    out.comments_count = int(comments_count or 0)
    out.is_liked = a.id in liked
    return out


def get_announcements(db: Session, student_id: int | None = None, limit: int | None = None) -> list[AnnouncementOut]:
    """Newest first. ``is_liked`` is only meaningful when a student is given."""
    q = _announcement_query(db).order_by(Announcement.created_at.desc(), Announcement.id.desc())
    if limit is not None:
        q = q.limit(limit)
    liked = _liked_ids(db, student_id)
    return [_to_out(r, liked) for r in q.all()]


def get_announcement(db: Session, announcement_id: int, student_id: int | None = None) -> AnnouncementOut | None:
    row = _announcement_query(db).filter(Announcement.id == announcement_id).first()
    return _to_out(row, _liked_ids(db, student_id)) if row else None


def create_announcement(db: Session, body: AnnouncementCreate) -> AnnouncementOut:
    a = Announcement(
        owner=body.owner,
        title=body.title,
        description=body.description,
        created_at=now_iso(body.created_at),
    )
    db.add(a)
    commit_or_raise(db)
    logger.info("Announcement published by %s: %s", a.owner, a.title)
    return get_announcement(db, a.id)


def update_announcement(db: Session, announcement_id: int, body: AnnouncementUpdate) -> AnnouncementOut:
    a = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not a:
        raise NotFoundError(f"Announcement {announcement_id} not found")
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(a, k, v)
    commit_or_raise(db)
    return get_announcement(db, announcement_id)


def delete_announcement(db: Session, announcement_id: int):
    """Comments and likes go with it."""
    a = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not a:
        raise NotFoundError(f"Announcement {announcement_id} not found")
    db.delete(a)
    commit_or_raise(db)


# ==================== comments ====================

def get_announcement_comments(db: Session, announcement_id: int) -> list[AnnouncementCommentOut]:
    rows = (
        db.query(AnnouncementComment)
        .filter(AnnouncementComment.announcement_id == announcement_id)
        .order_by(AnnouncementComment.created_at.asc(), AnnouncementComment.id.asc())
        .all()
    )
    return [AnnouncementCommentOut.model_validate(r) for r in rows]


def create_announcement_comment(db: Session, body: AnnouncementCommentCreate) -> AnnouncementCommentOut:
    if not db.query(Announcement.id).filter(Announcement.id == body.announcement_id).first():
        raise NotFoundError(f"Announcement {body.announcement_id} not found")
    if not db.query(Student.id).filter(Student.id == body.student_id).first():
        raise NotFoundError(f"Student {body.student_id} not found")

    c = AnnouncementComment(**body.model_dump())
    db.add(c)
    commit_or_raise(db)
    return AnnouncementCommentOut.model_validate(c)


def delete_announcement_comment(db: Session, comment_id: int):
    c = db.query(AnnouncementComment).filter(AnnouncementComment.id == comment_id).first()
    if not c:
        raise NotFoundError(f"Comment {comment_id} not found")
    db.delete(c)
    commit_or_raise(db)


# ==================== likes ====================

def toggle_announcement_like(db: Session, announcement_id: int, student_id: int) -> LikeToggleOut:
    if not db.query(Announcement.id).filter(Announcement.id == announcement_id).first():
        raise NotFoundError(f"Announcement {announcement_id} not found")

    like = (
        db.query(AnnouncementLike)
        .filter(AnnouncementLike.announcement_id == announcement_id, AnnouncementLike.student_id == student_id)
        .first()
    )
    if like:
        db.delete(like)
        liked = False
    else:
        if not db.query(Student.id).filter(Student.id == student_id).first():
            raise NotFoundError(f"Student {student_id} not found")
        db.add(AnnouncementLike(announcement_id=announcement_id, student_id=student_id))
        liked = True
    commit_or_raise(db)

    count = db.query(AnnouncementLike).filter(AnnouncementLike.announcement_id == announcement_id).count()
    return LikeToggleOut(announcement_id=announcement_id, liked=liked, likes_count=count)
