"""
Image pipeline: originals uploaded by the browser are turned into WebP
variants of fixed widths and the original is removed.
"""
import io
import logging
import re

import requests
from PIL import Image, ImageOps

from . import storage

logger = logging.getLogger(__name__)

# Variant name -> target width in px
IMAGE_VARIANTS = {
    'thumb': 150,
    'sm': 400,
    'md': 800,
    'lg': 1200,
}

KIND_VEHICLE_PHOTO = 'vehicle_photo'
KIND_RECEIPT = 'receipt'

WEBP_QUALITY = {
    KIND_VEHICLE_PHOTO: 85,
    KIND_RECEIPT: 90,
}

REMOTE_FETCH_TIMEOUT = 15
MAX_REMOTE_IMAGE_BYTES = 10 * 1024 * 1024

_VARIANT_SUFFIX_RE = re.compile(r'-(%s)\.webp$' % '|'.join(IMAGE_VARIANTS))


def get_variant_key(original_key, variant):
    """vehicles/1/AUCTION/abc.jpg -> vehicles/1/AUCTION/abc-md.webp"""
    base = re.sub(r'\.[^./]+$', '', original_key)
    return f'{base}-{variant}.webp'


def resize_to_webp(image, width, quality):
    """Scale down to the given width keeping the aspect ratio, then encode as WebP"""
    if image.width > width:
        height = max(1, round(image.height * width / image.width))
        variant = image.resize((width, height), Image.Resampling.LANCZOS)
    else:
        variant = image
    buffer = io.BytesIO()
    variant.save(buffer, format='WEBP', quality=quality)
    return buffer.getvalue()


def generate_variants(data, quality):
    """Return {variant_name: webp_bytes} for every configured width"""
    with Image.open(io.BytesIO(data)) as original:
        image = ImageOps.exif_transpose(original)
        if image.mode not in ('RGB', 'RGBA'):
            image = image.convert('RGBA' if 'A' in image.getbands() else 'RGB')
        return {
            name: resize_to_webp(image, width, quality)
            for name, width in IMAGE_VARIANTS.items()
        }


def process_image(key, kind=KIND_VEHICLE_PHOTO):
    """
    Fetch the original, upload every variant, then delete the original.

    Returns {'success', 'variants': {name: public_url}, 'error'}. On failure
    the original stays in storage.
    """
    quality = WEBP_QUALITY.get(kind, WEBP_QUALITY[KIND_VEHICLE_PHOTO])
    try:
        data = storage.get_object_bytes(key)
        variants = {}
        for name, body in generate_variants(data, quality).items():
            variant_key = get_variant_key(key, name)
            storage.upload_object(variant_key, body, 'image/webp')
            variants[name] = storage.get_public_url(variant_key)
    except Exception as e:
        logger.error(f"Failed to process image {key}: {str(e)}", exc_info=True)
        return {'success': False, 'variants': {}, 'error': str(e) or 'Failed to process image'}

    try:
        storage.delete_object(key)
    except Exception as e:
        logger.warning(f"Could not delete original {key} after processing: {str(e)}")

    logger.info(f"Processed image {key} into {len(variants)} variants")
    return {'success': True, 'variants': variants, 'error': None}


def delete_image_variants(url):
    """
    Delete every variant of a stored image given any of its variant URLs.
    Best effort: storage errors are logged and ignored. Returns the number
    of variants deleted.
    """
    key = storage.get_key_from_url(url)
    if not key:
        logger.warning(f"Not deleting variants of {url}: not a storage URL")
        return 0

    base = _VARIANT_SUFFIX_RE.sub('', key)
    deleted = 0
    for name in IMAGE_VARIANTS:
        variant_key = f'{base}-{name}.webp'
        try:
            storage.delete_object(variant_key)
            deleted += 1
        except Exception as e:
            logger.warning(f"Could not delete variant {variant_key}: {str(e)}")
    return deleted


def fetch_remote_image(url):
    """
    Download an image from a public URL (e.g. an auction listing photo).
    Returns (bytes, content_type).
    """
    response = requests.get(url, timeout=REMOTE_FETCH_TIMEOUT, stream=True)
    response.raise_for_status()
    content_type = response.headers.get('Content-Type', '').split(';')[0].strip()
    if not content_type.startswith('image/'):
        raise ValueError(f'URL does not point to an image ({content_type or "unknown type"})')

    data = response.raw.read(MAX_REMOTE_IMAGE_BYTES + 1, decode_content=True)
    if len(data) > MAX_REMOTE_IMAGE_BYTES:
        raise ValueError('Remote image is larger than 10MB')
    return data, content_type
