"""Write model for the photo gallery: categories, uploads, moderation, likes and comments.

Ownership checks live here so every entry point enforces them the same way.
Returns DTOs instead of ORM models.
"""

import logging
import re
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import GuestDTO
from src.photos.dtos import (
    CategoryAlreadyExistsError,
    CategoryDTO,
    CategoryNotFoundError,
    CommentDTO,
    CommentNotFoundError,
    InvalidCommentError,
    LikeResultDTO,
    PhotoDTO,
    PhotoNotFoundError,
    PhotoPermissionError,
    StoredFileDTO,
)
from src.photos.repository.orm_models import Photo, PhotoCategory, PhotoComment, PhotoLike
from src.photos.repository.read_models import build_photo_dto, can_see, count_likes
from src.models.user import User

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")


class PhotoWriteModel(ABC):
    """Abstract base class for photo write operations."""

    @abstractmethod
    async def create_category(self, name: str, description: str | None = None) -> CategoryDTO:
        raise NotImplementedError

    @abstractmethod
    async def create_photo(
        self,
        uploader: GuestDTO,
        stored_file: StoredFileDTO,
        caption: str | None = None,
        category_id: UUID | None = None,
    ) -> PhotoDTO:
        """Record an already stored file. Admin uploads are approved right away."""
        raise NotImplementedError

    @abstractmethod
    async def update_photo(
        self,
        photo_id: UUID,
        actor: GuestDTO,
        caption: str | None = None,
        category_id: UUID | None = None,
    ) -> PhotoDTO:
        raise NotImplementedError

    @abstractmethod
    async def moderate_photo(
        self,
        photo_id: UUID,
        actor: GuestDTO,
        is_approved: bool | None = None,
        is_featured: bool | None = None,
    ) -> PhotoDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_photo(self, photo_id: UUID, actor: GuestDTO) -> str:
        """Delete the row and return the stored filename so the caller can remove the file."""
        raise NotImplementedError

    @abstractmethod
    async def like_photo(self, photo_id: UUID, actor: GuestDTO) -> LikeResultDTO:
        raise NotImplementedError

    @abstractmethod
    async def unlike_photo(self, photo_id: UUID, actor: GuestDTO) -> LikeResultDTO:
        raise NotImplementedError

    @abstractmethod
    async def add_comment(self, photo_id: UUID, actor: GuestDTO, comment: str) -> CommentDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_comment(self, photo_id: UUID, comment_id: UUID, actor: GuestDTO) -> None:
        raise NotImplementedError


class SqlPhotoWriteModel(PhotoWriteModel):
    """SQL implementation of photo write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_category(self, name: str, description: str | None = None) -> CategoryDTO:
        """Raises CategoryAlreadyExistsError when the name or its slug is taken."""
        name = name.strip()
        slug = slugify(name)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            existing = await session.execute(
                select(PhotoCategory.id).where(
                    or_(func.lower(PhotoCategory.name) == name.lower(), PhotoCategory.slug == slug)
                )
            )
            if existing.first() is not None:
                raise CategoryAlreadyExistsError(name)

            category = PhotoCategory(name=name, slug=slug, description=description)
            session.add(category)
            await session.flush()
            logger.info("Created photo category %s", slug)
            return CategoryDTO.from_category(category)

    async def create_photo(
        self,
        uploader: GuestDTO,
        stored_file: StoredFileDTO,
        caption: str | None = None,
        category_id: UUID | None = None,
    ) -> PhotoDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            if category_id is not None:
                await self._get_category(session, category_id)

            photo = Photo(
                user_id=uploader.id,
                category_id=category_id,
                filename=stored_file.filename,
                original_filename=stored_file.original_filename,
                file_path=stored_file.file_path,
                file_size=stored_file.file_size,
                mime_type=stored_file.mime_type,
                caption=caption,
                is_approved=uploader.is_admin,
                is_featured=False,
            )
            session.add(photo)
            await session.flush()
            logger.info("Photo %s uploaded by %s", photo.id, uploader.id)
            return await build_photo_dto(session, photo, uploader)

    async def update_photo(
        self,
        photo_id: UUID,
        actor: GuestDTO,
        caption: str | None = None,
        category_id: UUID | None = None,
    ) -> PhotoDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            photo = await self._get_photo(session, photo_id, actor)
            self._check_owner(photo.user_id, actor, "You can only edit your own photos")

            if caption is not None:
                photo.caption = caption
            if category_id is not None:
                await self._get_category(session, category_id)
                photo.category_id = category_id
            await session.flush()
            return await build_photo_dto(session, photo, actor)

    async def moderate_photo(
        self,
        photo_id: UUID,
        actor: GuestDTO,
        is_approved: bool | None = None,
        is_featured: bool | None = None,
    ) -> PhotoDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            photo = await self._get_photo(session, photo_id, actor)
            if is_approved is not None:
                photo.is_approved = is_approved
            if is_featured is not None:
                photo.is_featured = is_featured
            await session.flush()
            logger.info(
                "Photo %s moderated by %s (approved=%s, featured=%s)",
                photo.id,
                actor.id,
                photo.is_approved,
                photo.is_featured,
            )
            return await build_photo_dto(session, photo, actor)

    async def delete_photo(self, photo_id: UUID, actor: GuestDTO) -> str:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            photo = await self._get_photo(session, photo_id, actor)
            self._check_owner(photo.user_id, actor, "You can only delete your own photos")

            filename = photo.filename
            await session.execute(delete(PhotoLike).where(PhotoLike.photo_id == photo.id))
            await session.execute(delete(PhotoComment).where(PhotoComment.photo_id == photo.id))
            await session.delete(photo)
            await session.flush()
            logger.info("Photo %s deleted by %s", photo_id, actor.id)
            return filename

    async def like_photo(self, photo_id: UUID, actor: GuestDTO) -> LikeResultDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await self._get_photo(session, photo_id, actor)
            existing = await session.execute(
                select(PhotoLike.id).where(PhotoLike.photo_id == photo_id, PhotoLike.user_id == actor.id)
            )
            if existing.first() is None:
                session.add(PhotoLike(photo_id=photo_id, user_id=actor.id))
                await session.flush()

            return LikeResultDTO(
                photo_id=photo_id,
                like_count=await count_likes(session, photo_id),
                liked_by_me=True,
            )

    async def unlike_photo(self, photo_id: UUID, actor: GuestDTO) -> LikeResultDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await self._get_photo(session, photo_id, actor)
            await session.execute(
                delete(PhotoLike).where(PhotoLike.photo_id == photo_id, PhotoLike.user_id == actor.id)
            )
            await session.flush()

            return LikeResultDTO(
                photo_id=photo_id,
                like_count=await count_likes(session, photo_id),
                liked_by_me=False,
            )

    async def add_comment(self, photo_id: UUID, actor: GuestDTO, comment: str) -> CommentDTO:
        text = comment.strip()
        if not text:
            raise InvalidCommentError("Comment cannot be empty")

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await self._get_photo(session, photo_id, actor)
            row = PhotoComment(photo_id=photo_id, user_id=actor.id, comment=text, is_approved=True)
            session.add(row)
            await session.flush()
            author = await session.get(User, actor.id)
            return CommentDTO.from_comment(row, author)

    async def delete_comment(self, photo_id: UUID, comment_id: UUID, actor: GuestDTO) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(PhotoComment).where(
                    PhotoComment.id == comment_id, PhotoComment.photo_id == photo_id
                )
            )
            comment = result.scalar_one_or_none()
            if comment is None:
                raise CommentNotFoundError()
            self._check_owner(comment.user_id, actor, "You can only delete your own comments")

            await session.delete(comment)
            await session.flush()

    async def _get_photo(self, session: AsyncSession, photo_id: UUID, viewer: GuestDTO) -> Photo:
        photo = await session.get(Photo, photo_id)
        if photo is None or not can_see(photo, viewer):
            raise PhotoNotFoundError()
        return photo

    async def _get_category(self, session: AsyncSession, category_id: UUID) -> PhotoCategory:
        category = await session.get(PhotoCategory, category_id)
        if category is None:
            raise CategoryNotFoundError()
        return category

    @staticmethod
    def _check_owner(owner_id: UUID, actor: GuestDTO, message: str) -> None:
        if owner_id != actor.id and not actor.is_admin:
            raise PhotoPermissionError(message)
