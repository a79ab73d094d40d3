"""
Cloudflare R2 object storage (S3 compatible API through boto3).
Vehicle photos and balance receipts are uploaded straight from the browser
with presigned PUT URLs and served from the public R2 domain.
"""
import os
import logging
from urllib.parse import urlparse

from django.conf import settings

logger = logging.getLogger(__name__)

R2_ACCOUNT_ID = getattr(
    settings,
    'R2_ACCOUNT_ID',
    os.getenv('R2_ACCOUNT_ID', '')
)

R2_ACCESS_KEY_ID = getattr(
    settings,
    'R2_ACCESS_KEY_ID',
    os.getenv('R2_ACCESS_KEY_ID', '')
)

R2_SECRET_ACCESS_KEY = getattr(
    settings,
    'R2_SECRET_ACCESS_KEY',
    os.getenv('R2_SECRET_ACCESS_KEY', '')
)

R2_BUCKET_NAME = getattr(
    settings,
    'R2_BUCKET_NAME',
    os.getenv('R2_BUCKET_NAME', '')
)

# Public domain serving the bucket (without scheme)
R2_PUBLIC_DOMAIN = getattr(
    settings,
    'R2_PUBLIC_DOMAIN',
    os.getenv('R2_PUBLIC_DOMAIN', '')
)

_client = None


def get_s3_client():
    """Return a cached boto3 S3 client pointed at the R2 endpoint"""
    global _client
    if _client is None:
        import boto3
        from botocore.config import Config

        _client = boto3.client(
            's3',
            endpoint_url=f'https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com',
            aws_access_key_id=R2_ACCESS_KEY_ID,
            aws_secret_access_key=R2_SECRET_ACCESS_KEY,
            region_name='auto',
            config=Config(signature_version='s3v4'),
        )
    return _client


def generate_presigned_upload_url(key, content_type, expires_in=3600):
    """Presigned PUT URL the browser uploads the original file to"""
    return get_s3_client().generate_presigned_url(
        'put_object',
        Params={'Bucket': R2_BUCKET_NAME, 'Key': key, 'ContentType': content_type},
        ExpiresIn=expires_in,
    )


def get_object_bytes(key):
    response = get_s3_client().get_object(Bucket=R2_BUCKET_NAME, Key=key)
    return response['Body'].read()


def upload_object(key, body, content_type):
    get_s3_client().put_object(
        Bucket=R2_BUCKET_NAME,
        Key=key,
        Body=body,
        ContentType=content_type,
        CacheControl='public, max-age=31536000, immutable',
    )
    logger.debug(f"Uploaded object {key} ({len(body)} bytes)")


def delete_object(key):
    get_s3_client().delete_object(Bucket=R2_BUCKET_NAME, Key=key)
    logger.debug(f"Deleted object {key}")


def object_exists(key):
    """True when the key exists; any client error counts as missing"""
    from botocore.exceptions import ClientError

    try:
        get_s3_client().head_object(Bucket=R2_BUCKET_NAME, Key=key)
        return True
    except ClientError as e:
        logger.debug(f"Object {key} not found: {e}")
        return False


def get_public_url(key):
    return f'https://{R2_PUBLIC_DOMAIN}/{key}'


def get_key_from_url(url):
    """Storage key of a public URL, or None when the URL is not on our domain"""
    if not url:
        return None
    parsed = urlparse(url)
    if not R2_PUBLIC_DOMAIN or parsed.netloc != R2_PUBLIC_DOMAIN:
        return None
    key = parsed.path.lstrip('/')
    return key or None
