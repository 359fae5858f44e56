from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.photos.repository.orm_models import Photo, PhotoCategory, PhotoComment
    from src.models.user import User


class PhotoNotFoundError(Exception):
    """Raised when a photo does not exist or is hidden from the caller."""

    def __init__(self, message: str = "Photo not found") -> None:
        super().__init__(message)


class CategoryNotFoundError(Exception):
    def __init__(self, message: str = "Category not found") -> None:
        super().__init__(message)


class CategoryAlreadyExistsError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Category '{name}' already exists")


class CommentNotFoundError(Exception):
    def __init__(self, message: str = "Comment not found") -> None:
        super().__init__(message)


class PhotoPermissionError(Exception):
    """Raised when someone other than the owner or an admin changes a photo or comment."""

    pass


class InvalidPhotoError(Exception):
    """Raised for uploads with a disallowed type, no content or too many bytes."""

    pass


class InvalidCommentError(Exception):
    pass


@dataclass(frozen=True)
class CategoryDTO:
    id: UUID
    name: str
    slug: str
    description: str | None = None

    @classmethod
    def from_category(cls, category: "PhotoCategory") -> "CategoryDTO":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
        )


@dataclass(frozen=True)
class StoredFileDTO:
    """A file written to the upload directory, not yet attached to a photo row."""

    filename: str
    original_filename: str
    file_path: str
    file_size: int
    mime_type: str


@dataclass(frozen=True)
class PhotoDTO:
    id: UUID
    user_id: UUID
    filename: str
    original_filename: str
    file_size: int
    mime_type: str
    is_approved: bool
    is_featured: bool
    upload_date: datetime
    uploader_name: str | None = None
    category_id: UUID | None = None
    caption: str | None = None
    like_count: int = 0
    comment_count: int = 0
    liked_by_me: bool = False

    @property
    def url(self) -> str:
        return f"/uploads/{self.filename}"

    @classmethod
    def from_photo(
        cls,
        photo: "Photo",
        uploader: "User | None" = None,
        like_count: int = 0,
        comment_count: int = 0,
        liked_by_me: bool = False,
    ) -> "PhotoDTO":
        return cls(
            id=photo.id,
            user_id=photo.user_id,
            filename=photo.filename,
            original_filename=photo.original_filename,
            file_size=photo.file_size,
            mime_type=photo.mime_type,
            is_approved=photo.is_approved,
            is_featured=photo.is_featured,
            upload_date=photo.upload_date,
            uploader_name=uploader.full_name if uploader else None,
            category_id=photo.category_id,
            caption=photo.caption,
            like_count=like_count,
            comment_count=comment_count,
            liked_by_me=liked_by_me,
        )


@dataclass(frozen=True)
class CommentDTO:
    id: UUID
    photo_id: UUID
    user_id: UUID
    comment: str
    created_at: datetime
    author_name: str | None = None

    @classmethod
    def from_comment(cls, comment: "PhotoComment", author: "User | None" = None) -> "CommentDTO":
        return cls(
            id=comment.id,
            photo_id=comment.photo_id,
            user_id=comment.user_id,
            comment=comment.comment,
            created_at=comment.created_at,
            author_name=author.full_name if author else None,
        )


@dataclass(frozen=True)
class LikeResultDTO:
    photo_id: UUID
    like_count: int
    liked_by_me: bool
