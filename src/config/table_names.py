from enum import Enum


class TableNames(str, Enum):
    USERS = "users"
    RSVPS = "rsvps"
    USER_SESSIONS = "user_sessions"
    PHOTOS = "photos"
    PHOTO_CATEGORIES = "photo_categories"
    PHOTO_COMMENTS = "photo_comments"
    PHOTO_LIKES = "photo_likes"
