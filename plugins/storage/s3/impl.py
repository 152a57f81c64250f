from __future__ import annotations
import os
from typing import Optional

# Lazy imports so local runs without boto are fine
try:
    import boto3
except Exception:
    boto3 = None


class S3Storage:
    """One S3 object per key under ``<bucket>/<prefix>/<key>.json``."""
    def __init__(self, bucket: Optional[str] = None, prefix: Optional[str] = None, client=None):
        self.bucket = bucket or os.getenv("LAPWATCH_S3_BUCKET", "")
        self.prefix = (prefix or os.getenv("LAPWATCH_S3_PREFIX", "lapwatch/timers")).rstrip("/")
        if client is None:
            if boto3 is None:
                raise RuntimeError("S3 storage requires boto3 (pip install 'lapwatch[s3]')")
            client = boto3.session.Session().client("s3")
        if not self.bucket:
            raise RuntimeError("S3 storage requires a bucket (set LAPWATCH_S3_BUCKET)")
        self._client = client

    def _object_key(self, key: str) -> str:
        return f"{self.prefix}/{key}.json"

    def get(self, key: str) -> Optional[str]:
        try:
            resp = self._client.get_object(Bucket=self.bucket, Key=self._object_key(key))
        except self._client.exceptions.NoSuchKey:
            return None
        return resp["Body"].read().decode("utf-8")

    def set(self, key: str, value: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=self._object_key(key),
            Body=value.encode("utf-8"),
            ContentType="application/json",
        )

    def delete(self, key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=self._object_key(key))
