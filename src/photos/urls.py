PHOTOS_URL = "/api/v1/photos"
PHOTO_CATEGORIES_URL = "/api/v1/photos/categories"
PHOTO_URL = "/api/v1/photos/{photo_id}"
PHOTO_MODERATION_URL = "/api/v1/photos/{photo_id}/moderation"
PHOTO_LIKES_URL = "/api/v1/photos/{photo_id}/likes"
PHOTO_COMMENTS_URL = "/api/v1/photos/{photo_id}/comments"
PHOTO_COMMENT_URL = "/api/v1/photos/{photo_id}/comments/{comment_id}"

UPLOADS_PATH = "/uploads"
