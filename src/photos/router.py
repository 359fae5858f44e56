from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from src.auth.dependencies import get_current_user, require_admin
from src.guests.dtos import GuestDTO
from src.photos.dtos import (
    CategoryAlreadyExistsError,
    CategoryDTO,
    CategoryNotFoundError,
    CommentDTO,
    CommentNotFoundError,
    InvalidCommentError,
    InvalidPhotoError,
    LikeResultDTO,
    PhotoDTO,
    PhotoNotFoundError,
    PhotoPermissionError,
)
from src.photos.repository.read_models import PhotoReadModel, SqlPhotoReadModel
from src.photos.repository.write_models import PhotoWriteModel, SqlPhotoWriteModel
from src.photos.storage import delete_stored_file, save_upload
from src.photos.urls import (
    PHOTO_CATEGORIES_URL,
    PHOTO_COMMENT_URL,
    PHOTO_COMMENTS_URL,
    PHOTO_LIKES_URL,
    PHOTO_MODERATION_URL,
    PHOTO_URL,
    PHOTOS_URL,
)
from src.responses import StandardResponse

router = APIRouter()


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    slug: str
    description: str | None = None

    @classmethod
    def from_dto(cls, category: CategoryDTO) -> "CategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
        )


class PhotoUpdate(BaseModel):
    caption: str | None = None
    category_id: UUID | None = None


class PhotoModeration(BaseModel):
    is_approved: bool | None = None
    is_featured: bool | None = None


class PhotoResponse(BaseModel):
    id: UUID
    user_id: UUID
    uploader_name: str | None = None
    category_id: UUID | None = None
    url: str
    filename: str
    original_filename: str
    file_size: int
    mime_type: str
    caption: str | None = None
    is_approved: bool
    is_featured: bool
    upload_date: datetime
    like_count: int
    comment_count: int
    liked_by_me: bool

    @classmethod
    def from_dto(cls, photo: PhotoDTO) -> "PhotoResponse":
        return cls(
            id=photo.id,
            user_id=photo.user_id,
            uploader_name=photo.uploader_name,
            category_id=photo.category_id,
            url=photo.url,
            filename=photo.filename,
            original_filename=photo.original_filename,
            file_size=photo.file_size,
            mime_type=photo.mime_type,
            caption=photo.caption,
            is_approved=photo.is_approved,
            is_featured=photo.is_featured,
            upload_date=photo.upload_date,
            like_count=photo.like_count,
            comment_count=photo.comment_count,
            liked_by_me=photo.liked_by_me,
        )


class PhotoListResponse(BaseModel):
    photos: list[PhotoResponse]
    count: int


class LikeResponse(BaseModel):
    photo_id: UUID
    like_count: int
    liked_by_me: bool

    @classmethod
    def from_dto(cls, result: LikeResultDTO) -> "LikeResponse":
        return cls(
            photo_id=result.photo_id,
            like_count=result.like_count,
            liked_by_me=result.liked_by_me,
        )


class CommentCreate(BaseModel):
    comment: str = Field(max_length=2000)


class CommentResponse(BaseModel):
    id: UUID
    photo_id: UUID
    user_id: UUID
    author_name: str | None = None
    comment: str
    created_at: datetime

    @classmethod
    def from_dto(cls, comment: CommentDTO) -> "CommentResponse":
        return cls(
            id=comment.id,
            photo_id=comment.photo_id,
            user_id=comment.user_id,
            author_name=comment.author_name,
            comment=comment.comment,
            created_at=comment.created_at,
        )


def get_photo_read_model() -> PhotoReadModel:
    """Dependency to get photo read model instance."""
    return SqlPhotoReadModel()


def get_photo_write_model() -> PhotoWriteModel:
    """Dependency to get photo write model instance."""
    return SqlPhotoWriteModel()


@router.get(PHOTO_CATEGORIES_URL, response_model=StandardResponse[list[CategoryResponse]])
async def list_categories(
    _: GuestDTO = Depends(get_current_user),
    read_model: PhotoReadModel = Depends(get_photo_read_model),
) -> StandardResponse[list[CategoryResponse]]:
    categories = await read_model.list_categories()
    return StandardResponse(data=[CategoryResponse.from_dto(category) for category in categories])


@router.post(
    PHOTO_CATEGORIES_URL,
    response_model=StandardResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    category_data: CategoryCreate,
    _: GuestDTO = Depends(require_admin),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[CategoryResponse]:
    try:
        category = await write_model.create_category(category_data.name, category_data.description)
    except CategoryAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return StandardResponse(
        message="Category created successfully",
        data=CategoryResponse.from_dto(category),
    )


@router.get(PHOTOS_URL, response_model=StandardResponse[PhotoListResponse])
async def list_photos(
    category_id: UUID | None = None,
    featured: bool | None = None,
    user: GuestDTO = Depends(get_current_user),
    read_model: PhotoReadModel = Depends(get_photo_read_model),
) -> StandardResponse[PhotoListResponse]:
    """Gallery listing, featured photos first, newest first within each group."""
    photos = await read_model.list_photos(user, category_id=category_id, featured=featured)
    return StandardResponse(
        data=PhotoListResponse(
            photos=[PhotoResponse.from_dto(photo) for photo in photos],
            count=len(photos),
        )
    )


@router.post(
    PHOTOS_URL,
    response_model=StandardResponse[PhotoResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upload_photo(
    file: UploadFile = File(...),
    caption: str | None = Form(None),
    category_id: UUID | None = Form(None),
    user: GuestDTO = Depends(get_current_user),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[PhotoResponse]:
    try:
        stored_file = await save_upload(file)
    except InvalidPhotoError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        photo = await write_model.create_photo(
            user, stored_file, caption=caption, category_id=category_id
        )
    except CategoryNotFoundError as e:
        delete_stored_file(stored_file.filename)
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        delete_stored_file(stored_file.filename)
        raise

    message = (
        "Photo uploaded successfully"
        if photo.is_approved
        else "Photo uploaded successfully and is awaiting approval"
    )
    return StandardResponse(message=message, data=PhotoResponse.from_dto(photo))


@router.get(PHOTO_URL, response_model=StandardResponse[PhotoResponse])
async def get_photo(
    photo_id: UUID,
    user: GuestDTO = Depends(get_current_user),
    read_model: PhotoReadModel = Depends(get_photo_read_model),
) -> StandardResponse[PhotoResponse]:
    photo = await read_model.get_photo(photo_id, user)
    if photo is None:
        raise HTTPException(status_code=404, detail="Photo not found")
    return StandardResponse(data=PhotoResponse.from_dto(photo))


@router.patch(PHOTO_URL, response_model=StandardResponse[PhotoResponse])
async def update_photo(
    photo_id: UUID,
    photo_data: PhotoUpdate,
    user: GuestDTO = Depends(get_current_user),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[PhotoResponse]:
    try:
        photo = await write_model.update_photo(
            photo_id, user, caption=photo_data.caption, category_id=photo_data.category_id
        )
    except (PhotoNotFoundError, CategoryNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PhotoPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))

    return StandardResponse(message="Photo updated successfully", data=PhotoResponse.from_dto(photo))


@router.patch(PHOTO_MODERATION_URL, response_model=StandardResponse[PhotoResponse])
async def moderate_photo(
    photo_id: UUID,
    moderation: PhotoModeration,
    admin: GuestDTO = Depends(require_admin),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[PhotoResponse]:
    try:
        photo = await write_model.moderate_photo(
            photo_id,
            admin,
            is_approved=moderation.is_approved,
            is_featured=moderation.is_featured,
        )
    except PhotoNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return StandardResponse(message="Photo updated successfully", data=PhotoResponse.from_dto(photo))


@router.delete(PHOTO_URL, response_model=StandardResponse[None])
async def delete_photo(
    photo_id: UUID,
    user: GuestDTO = Depends(get_current_user),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[None]:
    try:
        filename = await write_model.delete_photo(photo_id, user)
    except PhotoNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PhotoPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))

    delete_stored_file(filename)
    return StandardResponse(message="Photo deleted successfully")


@router.post(PHOTO_LIKES_URL, response_model=StandardResponse[LikeResponse])
async def like_photo(
    photo_id: UUID,
    user: GuestDTO = Depends(get_current_user),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[LikeResponse]:
    try:
        result = await write_model.like_photo(photo_id, user)
    except PhotoNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return StandardResponse(data=LikeResponse.from_dto(result))


@router.delete(PHOTO_LIKES_URL, response_model=StandardResponse[LikeResponse])
async def unlike_photo(
    photo_id: UUID,
    user: GuestDTO = Depends(get_current_user),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[LikeResponse]:
    try:
        result = await write_model.unlike_photo(photo_id, user)
    except PhotoNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return StandardResponse(data=LikeResponse.from_dto(result))


@router.get(PHOTO_COMMENTS_URL, response_model=StandardResponse[list[CommentResponse]])
async def list_comments(
    photo_id: UUID,
    user: GuestDTO = Depends(get_current_user),
    read_model: PhotoReadModel = Depends(get_photo_read_model),
) -> StandardResponse[list[CommentResponse]]:
    comments = await read_model.list_comments(photo_id, user)
    if comments is None:
        raise HTTPException(status_code=404, detail="Photo not found")
    return StandardResponse(data=[CommentResponse.from_dto(comment) for comment in comments])


@router.post(
    PHOTO_COMMENTS_URL,
    response_model=StandardResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    photo_id: UUID,
    comment_data: CommentCreate,
    user: GuestDTO = Depends(get_current_user),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[CommentResponse]:
    try:
        comment = await write_model.add_comment(photo_id, user, comment_data.comment)
    except InvalidCommentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PhotoNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return StandardResponse(message="Comment added", data=CommentResponse.from_dto(comment))


@router.delete(PHOTO_COMMENT_URL, response_model=StandardResponse[None])
async def delete_comment(
    photo_id: UUID,
    comment_id: UUID,
    user: GuestDTO = Depends(get_current_user),
    write_model: PhotoWriteModel = Depends(get_photo_write_model),
) -> StandardResponse[None]:
    try:
        await write_model.delete_comment(photo_id, comment_id, user)
    except CommentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PhotoPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))

    return StandardResponse(message="Comment deleted")
