"""Object storage (Cloudflare R2) for salon logos"""

import logging

import boto3
from botocore.config import Config

from ..config import R2_ACCESS_KEY_ID, R2_ACCOUNT_ID, R2_BUCKET_NAME, R2_PUBLIC_URL, R2_SECRET_ACCESS_KEY

logger = logging.getLogger(__name__)

PRESIGNED_URL_EXPIRATION = 7 * 24 * 3600


def is_storage_configured() -> bool:
    return bool(R2_ACCOUNT_ID and R2_ACCESS_KEY_ID and R2_SECRET_ACCESS_KEY)


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def public_url_for(key: str) -> str:
    if R2_PUBLIC_URL:
        return f"{R2_PUBLIC_URL.rstrip('/')}/{key}"
    r2 = get_r2_client()
    return r2.generate_presigned_url(
        "get_object",
        Params={"Bucket": R2_BUCKET_NAME, "Key": key},
        ExpiresIn=PRESIGNED_URL_EXPIRATION,
    )


def delete_prefix(prefix: str) -> int:
    """Delete every object under a prefix; returns the number removed"""
    r2 = get_r2_client()
    listing = r2.list_objects_v2(Bucket=R2_BUCKET_NAME, Prefix=prefix)
    keys = [{"Key": obj["Key"]} for obj in listing.get("Contents", [])]
    if keys:
        r2.delete_objects(Bucket=R2_BUCKET_NAME, Delete={"Objects": keys})
        logger.info(f"🗑️ Removed {len(keys)} objects under {prefix}")
    return len(keys)


def upload_salon_logo(salon_id: str, contents: bytes, content_type: str, extension: str) -> str:
    """Replace the salon's logo and return its URL"""
    prefix = f"{salon_id}/"
    delete_prefix(prefix)

    key = f"{salon_id}/logo.{extension}"
    r2 = get_r2_client()
    r2.put_object(
        Bucket=R2_BUCKET_NAME,
        Key=key,
        Body=contents,
        ContentType=content_type,
        CacheControl="public, max-age=3600",
    )
    logger.info(f"✅ Uploaded logo for salon {salon_id}: {key}")
    return public_url_for(key)
