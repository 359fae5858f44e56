from uuid import UUID, uuid4

import pytest

from src.auth.dependencies import get_current_user
from src.guests.dtos import GuestDTO
from src.guests.features.manage_guests.write_model import SqlGuestAdminWriteModel
from src.models.base import utcnow
from src.photos.dtos import CategoryDTO, CommentDTO, PhotoDTO
from src.photos.repository.read_models import PhotoReadModel
from src.photos.router import get_photo_read_model
from src.photos.urls import (
    PHOTO_CATEGORIES_URL,
    PHOTO_COMMENTS_URL,
    PHOTO_LIKES_URL,
    PHOTO_MODERATION_URL,
    PHOTO_URL,
    PHOTOS_URL,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class InMemoryPhotoReadModel(PhotoReadModel):
    """In-memory read model for testing."""

    def __init__(self, photos: list[PhotoDTO], categories: list[CategoryDTO] | None = None):
        self.photos = photos
        self.categories = categories or []
        self.calls: list[dict] = []

    async def list_categories(self) -> list[CategoryDTO]:
        return self.categories

    async def list_photos(
        self, viewer: GuestDTO, category_id: UUID | None = None, featured: bool | None = None
    ) -> list[PhotoDTO]:
        self.calls.append({"viewer": viewer.id, "category_id": category_id, "featured": featured})
        return self.photos

    async def get_photo(self, photo_id: UUID, viewer: GuestDTO) -> PhotoDTO | None:
        return next((p for p in self.photos if p.id == photo_id), None)

    async def list_comments(self, photo_id: UUID, viewer: GuestDTO) -> list[CommentDTO] | None:
        return None


def make_photo(**kwargs) -> PhotoDTO:
    values = {
        "id": uuid4(),
        "user_id": uuid4(),
        "filename": "abc.jpg",
        "original_filename": "IMG_0001.jpg",
        "file_size": 1234,
        "mime_type": "image/jpeg",
        "is_approved": True,
        "is_featured": False,
        "upload_date": utcnow(),
        "like_count": 3,
        "comment_count": 1,
        "liked_by_me": True,
    }
    values.update(kwargs)
    return PhotoDTO(**values)


async def registered(**kwargs) -> GuestDTO:
    return await SqlGuestAdminWriteModel().create_guest(**kwargs)


@pytest.mark.asyncio
async def test_list_photos_passes_filters(client_factory, make_guest):
    user = make_guest()
    category_id = uuid4()
    read_model = InMemoryPhotoReadModel([make_photo(caption="Cake")])
    overrides = {get_current_user: lambda: user, get_photo_read_model: lambda: read_model}

    async with client_factory(overrides) as client:
        response = await client.get(
            PHOTOS_URL, params={"category_id": str(category_id), "featured": "true"}
        )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["count"] == 1
    photo = data["photos"][0]
    assert photo["url"] == "/uploads/abc.jpg"
    assert photo["like_count"] == 3
    assert photo["liked_by_me"] is True
    assert read_model.calls == [{"viewer": user.id, "category_id": category_id, "featured": True}]


@pytest.mark.asyncio
async def test_get_hidden_photo_returns_404(client_factory, make_guest):
    user = make_guest()
    overrides = {
        get_current_user: lambda: user,
        get_photo_read_model: lambda: InMemoryPhotoReadModel([]),
    }

    async with client_factory(overrides) as client:
        photo_response = await client.get(PHOTO_URL.format(photo_id=uuid4()))
        comments_response = await client.get(PHOTO_COMMENTS_URL.format(photo_id=uuid4()))

    assert photo_response.status_code == 404
    assert photo_response.json()["message"] == "Photo not found"
    assert comments_response.status_code == 404


@pytest.mark.asyncio
async def test_gallery_requires_login(client):
    response = await client.get(PHOTOS_URL)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_category_is_admin_only(client_factory, make_guest):
    guest = make_guest()

    async with client_factory({get_current_user: lambda: guest}) as client:
        response = await client.post(PHOTO_CATEGORIES_URL, json={"name": "Ceremony"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_category_lifecycle(client_factory):
    admin = await registered(first_name="Ada", last_name="Admin", is_admin=True)

    async with client_factory({get_current_user: lambda: admin}) as client:
        created = await client.post(PHOTO_CATEGORIES_URL, json={"name": "First Dance"})
        duplicate = await client.post(PHOTO_CATEGORIES_URL, json={"name": "first dance"})
        listed = await client.get(PHOTO_CATEGORIES_URL)

    assert created.status_code == 201
    assert created.json()["data"]["slug"] == "first-dance"
    assert duplicate.status_code == 409
    assert [c["name"] for c in listed.json()["data"]] == ["First Dance"]


@pytest.mark.asyncio
async def test_upload_like_comment_and_delete(client_factory, upload_dir):
    guest = await registered(first_name="Maria", last_name="Lopez")

    async with client_factory({get_current_user: lambda: guest}) as client:
        upload = await client.post(
            PHOTOS_URL,
            files={"file": ("party.png", PNG_BYTES, "image/png")},
            data={"caption": "Dance floor"},
        )
        photo = upload.json()["data"]
        like = await client.post(PHOTO_LIKES_URL.format(photo_id=photo["id"]))
        like_again = await client.post(PHOTO_LIKES_URL.format(photo_id=photo["id"]))
        comment = await client.post(
            PHOTO_COMMENTS_URL.format(photo_id=photo["id"]), json={"comment": " Lovely "}
        )
        empty_comment = await client.post(
            PHOTO_COMMENTS_URL.format(photo_id=photo["id"]), json={"comment": "  "}
        )
        fetched = await client.get(PHOTO_URL.format(photo_id=photo["id"]))
        stored_file = upload_dir / photo["filename"]
        existed = stored_file.exists()
        deleted = await client.delete(PHOTO_URL.format(photo_id=photo["id"]))

    assert upload.status_code == 201
    assert upload.json()["message"] == "Photo uploaded successfully and is awaiting approval"
    assert photo["is_approved"] is False
    assert photo["caption"] == "Dance floor"
    assert photo["mime_type"] == "image/png"
    assert photo["file_size"] == len(PNG_BYTES)
    assert photo["original_filename"] == "party.png"
    assert photo["filename"].endswith(".png")
    assert photo["url"] == f"/uploads/{photo['filename']}"

    assert like.json()["data"]["like_count"] == 1
    assert like_again.json()["data"]["like_count"] == 1
    assert comment.status_code == 201
    assert comment.json()["data"]["comment"] == "Lovely"
    assert empty_comment.status_code == 400
    assert fetched.json()["data"]["comment_count"] == 1
    assert fetched.json()["data"]["liked_by_me"] is True

    assert existed
    assert deleted.status_code == 200
    assert not stored_file.exists()


@pytest.mark.asyncio
async def test_upload_rejects_non_images(client_factory, make_guest, upload_dir):
    guest = make_guest()

    async with client_factory({get_current_user: lambda: guest}) as client:
        response = await client.post(
            PHOTOS_URL, files={"file": ("notes.txt", b"hello", "text/plain")}
        )

    assert response.status_code == 400
    assert "Unsupported file type" in response.json()["message"]
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_rejects_large_files(client_factory, make_guest, monkeypatch):
    from src.config.settings import settings

    monkeypatch.setattr(settings, "max_upload_bytes", 10)
    guest = make_guest()

    async with client_factory({get_current_user: lambda: guest}) as client:
        response = await client.post(
            PHOTOS_URL, files={"file": ("big.png", PNG_BYTES, "image/png")}
        )

    assert response.status_code == 400
    assert "File too large" in response.json()["message"]


@pytest.mark.asyncio
async def test_upload_with_unknown_category_removes_file(client_factory, upload_dir):
    guest = await registered(first_name="Maria", last_name="Lopez")

    async with client_factory({get_current_user: lambda: guest}) as client:
        response = await client.post(
            PHOTOS_URL,
            files={"file": ("party.png", PNG_BYTES, "image/png")},
            data={"category_id": str(uuid4())},
        )

    assert response.status_code == 404
    assert response.json()["message"] == "Category not found"
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_moderation_and_permissions(client_factory):
    owner = await registered(first_name="Maria", last_name="Lopez")
    other = await registered(first_name="Sam", last_name="Reed")
    admin = await registered(first_name="Ada", last_name="Admin", is_admin=True)

    async with client_factory({get_current_user: lambda: owner}) as client:
        upload = await client.post(
            PHOTOS_URL, files={"file": ("party.png", PNG_BYTES, "image/png")}
        )
    photo_id = upload.json()["data"]["id"]

    async with client_factory({get_current_user: lambda: other}) as client:
        hidden = await client.get(PHOTO_URL.format(photo_id=photo_id))
        not_admin = await client.patch(
            PHOTO_MODERATION_URL.format(photo_id=photo_id), json={"is_approved": True}
        )

    async with client_factory({get_current_user: lambda: admin}) as client:
        approved = await client.patch(
            PHOTO_MODERATION_URL.format(photo_id=photo_id),
            json={"is_approved": True, "is_featured": True},
        )

    async with client_factory({get_current_user: lambda: other}) as client:
        visible = await client.get(PHOTO_URL.format(photo_id=photo_id))
        edit = await client.patch(PHOTO_URL.format(photo_id=photo_id), json={"caption": "Mine now"})
        unlike = await client.delete(PHOTO_LIKES_URL.format(photo_id=photo_id))

    assert hidden.status_code == 404
    assert not_admin.status_code == 403
    assert approved.json()["data"]["is_featured"] is True
    assert visible.status_code == 200
    assert edit.status_code == 403
    assert unlike.json()["data"] == {"photo_id": photo_id, "like_count": 0, "liked_by_me": False}
