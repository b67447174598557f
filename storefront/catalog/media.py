"""
Image uploads to Cloudinary object storage.

Uploads are signed server side with the account's API secret; the secret
never leaves the backend. Configure with the CLOUDINARY_* settings.
"""
import hashlib
import logging
import time
from typing import Any, Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

UPLOAD_URL = 'https://api.cloudinary.com/v1_1/{cloud_name}/image/upload'
ALLOWED_CONTENT_TYPES = ('image/jpeg', 'image/png', 'image/webp', 'image/gif')


class MediaUploadError(Exception):
    """Raised when object storage is unavailable or rejects an upload"""


def is_configured() -> bool:
    return bool(settings.CLOUDINARY_CLOUD_NAME and settings.CLOUDINARY_API_KEY and settings.CLOUDINARY_API_SECRET)


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """
    SHA-1 signature of the upload parameters.

    Parameters are sorted by name and joined as ``key=value`` pairs with
    ``&``, then the API secret is appended before hashing.
    """
    payload = '&'.join(f'{key}={params[key]}' for key in sorted(params) if params[key] not in (None, ''))
    return hashlib.sha1(f'{payload}{api_secret}'.encode('utf-8')).hexdigest()


def upload_image(file, folder: Optional[str] = None) -> Dict[str, Any]:
    """
    Upload an image file and return its public location.

    Args:
        file: uploaded file object (Django UploadedFile or any file-like with ``name``)
        folder: storage folder, defaults to CLOUDINARY_FOLDER

    Returns:
        dict with 'url', 'public_id', 'width', 'height'

    Raises:
        MediaUploadError: storage not configured, unreachable or upload rejected
    """
    if not is_configured():
        raise MediaUploadError('Image storage is not configured')

    content_type = getattr(file, 'content_type', None)
    if content_type and content_type not in ALLOWED_CONTENT_TYPES:
        raise MediaUploadError(f'Unsupported image type: {content_type}')

    params = {
        'folder': folder if folder is not None else settings.CLOUDINARY_FOLDER,
        'timestamp': int(time.time()),
    }
    data = {
        **params,
        'api_key': settings.CLOUDINARY_API_KEY,
        'signature': sign_params(params, settings.CLOUDINARY_API_SECRET),
    }
    url = UPLOAD_URL.format(cloud_name=settings.CLOUDINARY_CLOUD_NAME)
    filename = getattr(file, 'name', 'upload')

    try:
        response = requests.post(
            url,
            data=data,
            files={'file': (filename, file, content_type or 'application/octet-stream')},
            timeout=settings.CLOUDINARY_TIMEOUT,
        )
    except requests.exceptions.Timeout:
        logger.error(f"Image upload timed out after {settings.CLOUDINARY_TIMEOUT}s: {filename}")
        raise MediaUploadError('Image upload timed out')
    except requests.exceptions.RequestException as e:
        logger.error(f"Image upload request failed: {str(e)}")
        raise MediaUploadError(f'Image upload failed: {str(e)}')

    if response.status_code != 200:
        logger.error(f"Image storage returned status {response.status_code}: {response.text[:200]}")
        raise MediaUploadError(f'Image upload failed: {response.text[:120]}')

    result = response.json()
    logger.info(f"Uploaded image {filename} as {result.get('public_id')}")
    return {
        'url': result.get('secure_url'),
        'public_id': result.get('public_id'),
        'width': result.get('width'),
        'height': result.get('height'),
    }
