"""Supabase Storage access through its S3-compatible endpoint."""
import boto3
from botocore.config import Config as BotoConfig
from flask import current_app

DEFAULT_CACHE_CONTROL = "max-age=3600"


def get_client(config=None):
    config = config or current_app.config
    base = config["SUPABASE_URL"].rstrip("/")
    return boto3.client(
        "s3",
        endpoint_url=f"{base}/storage/v1/s3",
        aws_access_key_id=config["SUPABASE_S3_ACCESS_KEY"],
        aws_secret_access_key=config["SUPABASE_S3_SECRET_KEY"],
        region_name=config["SUPABASE_S3_REGION"],
        config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


def upload(storage_key, data, content_type="image/jpeg", client=None, bucket=None):
    """Upload bytes to the product image bucket."""
    client = client or get_client()
    bucket = bucket or current_app.config["SUPABASE_STORAGE_BUCKET"]
    client.put_object(
        Bucket=bucket,
        Key=storage_key,
        Body=data,
        ContentType=content_type,
        CacheControl=DEFAULT_CACHE_CONTROL,
    )


def public_url(base_url, bucket, storage_key):
    return f"{base_url.rstrip('/')}/storage/v1/object/public/{bucket}/{storage_key}"


def get_public_url(storage_key):
    """Return the public object URL for a storage key."""
    return public_url(
        current_app.config["SUPABASE_URL"],
        current_app.config["SUPABASE_STORAGE_BUCKET"],
        storage_key,
    )


def delete(storage_key):
    client = get_client()
    bucket = current_app.config["SUPABASE_STORAGE_BUCKET"]
    client.delete_object(Bucket=bucket, Key=storage_key)

