import abc
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import GuestDTO
from src.models.user import User
from src.photos.dtos import CategoryDTO, CommentDTO, PhotoDTO
from src.photos.repository.orm_models import Photo, PhotoCategory, PhotoComment, PhotoLike


def visible_photos(viewer: GuestDTO):
    """Approved photos plus the viewer's own. Admins see everything."""
    stmt = select(Photo)
    if not viewer.is_admin:
        stmt = stmt.where(or_(Photo.is_approved.is_(True), Photo.user_id == viewer.id))
    return stmt


def can_see(photo: Photo, viewer: GuestDTO) -> bool:
    return viewer.is_admin or photo.is_approved or photo.user_id == viewer.id


def visible_comments(viewer: GuestDTO):
    stmt = select(PhotoComment)
    if not viewer.is_admin:
        stmt = stmt.where(or_(PhotoComment.is_approved.is_(True), PhotoComment.user_id == viewer.id))
    return stmt


async def count_likes(session: AsyncSession, photo_id: UUID) -> int:
    result = await session.execute(
        select(func.count()).select_from(PhotoLike).where(PhotoLike.photo_id == photo_id)
    )
    return result.scalar_one()


async def build_photo_dto(session: AsyncSession, photo: Photo, viewer: GuestDTO) -> PhotoDTO:
    """PhotoDTO for a single row, with the viewer-specific counters filled in."""
    uploader = await session.get(User, photo.user_id)
    comment_count = await session.execute(
        select(func.count())
        .select_from(visible_comments(viewer).where(PhotoComment.photo_id == photo.id).subquery())
    )
    liked = await session.execute(
        select(PhotoLike.id).where(PhotoLike.photo_id == photo.id, PhotoLike.user_id == viewer.id)
    )
    return PhotoDTO.from_photo(
        photo,
        uploader=uploader,
        like_count=await count_likes(session, photo.id),
        comment_count=comment_count.scalar_one(),
        liked_by_me=liked.first() is not None,
    )


class PhotoReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_categories(self) -> list[CategoryDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_photos(
        self,
        viewer: GuestDTO,
        category_id: UUID | None = None,
        featured: bool | None = None,
    ) -> list[PhotoDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_photo(self, photo_id: UUID, viewer: GuestDTO) -> PhotoDTO | None:
        """None when the photo is missing or hidden from the viewer."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_comments(self, photo_id: UUID, viewer: GuestDTO) -> list[CommentDTO] | None:
        """Comments oldest first, None when the photo is not visible."""
        raise NotImplementedError


class SqlPhotoReadModel(PhotoReadModel):
    """SQL implementation of photo read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def list_categories(self) -> list[CategoryDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(select(PhotoCategory).order_by(PhotoCategory.name))
            return [CategoryDTO.from_category(category) for category in result.scalars()]

    async def list_photos(
        self,
        viewer: GuestDTO,
        category_id: UUID | None = None,
        featured: bool | None = None,
    ) -> list[PhotoDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            like_counts = (
                select(PhotoLike.photo_id, func.count().label("total"))
                .group_by(PhotoLike.photo_id)
                .subquery()
            )
            comments = visible_comments(viewer).subquery()
            comment_counts = (
                select(comments.c.photo_id, func.count().label("total"))
                .group_by(comments.c.photo_id)
                .subquery()
            )

            stmt = (
                visible_photos(viewer)
                .add_columns(
                    User,
                    func.coalesce(like_counts.c.total, 0),
                    func.coalesce(comment_counts.c.total, 0),
                )
                .join(User, User.id == Photo.user_id)
                .outerjoin(like_counts, like_counts.c.photo_id == Photo.id)
                .outerjoin(comment_counts, comment_counts.c.photo_id == Photo.id)
                .order_by(Photo.is_featured.desc(), Photo.upload_date.desc())
            )
            if category_id is not None:
                stmt = stmt.where(Photo.category_id == category_id)
            if featured is not None:
                stmt = stmt.where(Photo.is_featured == featured)

            rows = (await session.execute(stmt)).all()

            liked_ids: set[UUID] = set()
            if rows:
                liked = await session.execute(
                    select(PhotoLike.photo_id).where(
                        PhotoLike.user_id == viewer.id,
                        PhotoLike.photo_id.in_([photo.id for photo, *_ in rows]),
                    )
                )
                liked_ids = set(liked.scalars())

            return [
                PhotoDTO.from_photo(
                    photo,
                    uploader=uploader,
                    like_count=like_count,
                    comment_count=comment_count,
                    liked_by_me=photo.id in liked_ids,
                )
                for photo, uploader, like_count, comment_count in rows
            ]

    async def get_photo(self, photo_id: UUID, viewer: GuestDTO) -> PhotoDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(visible_photos(viewer).where(Photo.id == photo_id))
            photo = result.scalar_one_or_none()
            if photo is None:
                return None
            return await build_photo_dto(session, photo, viewer)

    async def list_comments(self, photo_id: UUID, viewer: GuestDTO) -> list[CommentDTO] | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            photo = await session.execute(visible_photos(viewer).where(Photo.id == photo_id))
            if photo.scalar_one_or_none() is None:
                return None

            result = await session.execute(
                visible_comments(viewer)
                .add_columns(User)
                .join(User, User.id == PhotoComment.user_id)
                .where(PhotoComment.photo_id == photo_id)
                .order_by(PhotoComment.created_at)
            )
            return [CommentDTO.from_comment(comment, author) for comment, author in result.all()]
