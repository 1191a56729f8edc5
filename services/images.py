"""Filesystem storage for product images.

Files live under ``<UPLOAD_FOLDER>/products/`` with generated names. Records
keep the path relative to ``UPLOAD_FOLDER`` so the folder can be moved.
"""
import logging
import os
import uuid

from flask import current_app, url_for
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

IMAGE_DIRECTORY = 'products'


class ImageStorageError(Exception):
    """Raised when an uploaded image could not be written to disk."""


class ImageStore:
    def __init__(self, root):
        self.root = root

    def path_for(self, relative_path):
        return os.path.join(self.root, relative_path)

    def stage(self, file_storage):
        """Write ``file_storage`` under a fresh name and return its relative path.

        The file is stored before any record points at it, so a failed write
        never leaves a record referencing a missing file.
        """
        _, ext = os.path.splitext(secure_filename(file_storage.filename or ''))
        relative_path = f'{IMAGE_DIRECTORY}/{uuid.uuid4().hex}{ext.lower()}'
        target = self.path_for(relative_path)
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            file_storage.stream.seek(0)
            file_storage.save(target)
        except OSError as exc:
            logger.error('Could not store image %s', relative_path, exc_info=True)
            raise ImageStorageError(str(exc)) from exc
        logger.info('Stored image %s', relative_path)
        return relative_path

    def discard(self, relative_path):
        if not relative_path:
            return
        try:
            os.remove(self.path_for(relative_path))
        except FileNotFoundError:
            logger.warning('Image %s was already gone', relative_path)
        except OSError:
            # the record no longer references it; a leaked file is not fatal
            logger.error('Could not remove image %s', relative_path, exc_info=True)
        else:
            logger.info('Removed image %s', relative_path)

    def exists(self, relative_path):
        return bool(relative_path) and os.path.isfile(self.path_for(relative_path))

    def url_for(self, relative_path):
        return url_for('uploads', path=relative_path)


def image_store():
    return ImageStore(current_app.config['UPLOAD_FOLDER'])
