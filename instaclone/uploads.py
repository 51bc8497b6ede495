"""
Image uploads: every file is saved to a temp folder and size-checked before
any of them is pushed to Cloudinary; the local copies are removed whether or
not the uploads succeeded.
"""

import logging
import os
import uuid

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from flask import current_app
from werkzeug.utils import secure_filename

from .responses import UploadError, ValidationError

logger = logging.getLogger("insta-clone.uploads")

PROFILE_EXTENSIONS = {"jpeg", "jpg", "png"}
POST_EXTENSIONS = {"jpeg", "jpg", "png", "gif"}
PROFILE_FOLDER = "insta/images/profilePicture"
POST_FOLDER = "insta/images/postImages"


def init_uploads(app):
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)
    cloudinary.config(
        cloud_name=app.config["CLOUD_NAME"],
        api_key=app.config["CLOUD_API_KEY"],
        api_secret=app.config["CLOUD_API_SECRET"],
        secure=True,
    )
    logger.info("Uploads folder: %s", app.config["UPLOAD_FOLDER"])


# upload helpers
def allowed_file_extension(filename: str, allowed) -> bool:
    if "." not in filename:
        return False
    ext = filename.rsplit(".", 1)[1].lower()
    return ext in allowed


def is_image_mimetype(file_storage) -> bool:
    # some clients send a wrong mimetype
    mimetype = (file_storage.mimetype or "").lower()
    return mimetype.startswith("image/")


def check_image(file_storage, allowed):
    filename = secure_filename(file_storage.filename) if file_storage.filename else ""
    if not filename:
        raise ValidationError("Image file name is missing")
    if not allowed_file_extension(filename, allowed) or not is_image_mimetype(file_storage):
        raise ValidationError("File type not supported!")
    return filename


def _size_label(size: int) -> str:
    for unit, scale in (("MB", 1024 * 1024), ("KB", 1024)):
        if size >= scale:
            return f"{size / scale:g} {unit}"
    return f"{size} bytes"


def save_temp_file(file_storage, allowed) -> str:
    filename = check_image(file_storage, allowed)
    path = os.path.join(current_app.config["UPLOAD_FOLDER"], f"{uuid.uuid4().hex}_{filename}")
    file_storage.save(path)
    limit = current_app.config["MAX_IMAGE_SIZE"]
    if os.path.getsize(path) > limit:
        os.remove(path)
        raise ValidationError(f"Image is larger than {_size_label(limit)}")
    return path


def _push(path: str, folder: str, name: str) -> str:
    try:
        result = cloudinary.uploader.upload(path, folder=folder)
    except CloudinaryError as e:
        logger.error("Cloudinary upload failed for %s: %s", name, e)
        raise UploadError()
    return result["secure_url"]


def upload_image(file_storage, folder: str, allowed=POST_EXTENSIONS) -> str:
    """Upload one image and return its https URL."""
    return upload_images([file_storage], folder, allowed)[0]


def upload_images(files, folder: str = POST_FOLDER, allowed=POST_EXTENSIONS):
    # every file is type- and size-checked on disk before the first upload
    for f in files:
        check_image(f, allowed)
    paths = []
    try:
        for f in files:
            paths.append(save_temp_file(f, allowed))
        return [_push(path, folder, f.filename) for f, path in zip(files, paths)]
    finally:
        for path in paths:
            if os.path.exists(path):
                os.remove(path)
