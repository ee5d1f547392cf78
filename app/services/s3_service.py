import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

EXTENSION_BY_CONTENT_TYPE = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


class PhotoUploadError(Exception):
    """Raised when a photo cannot be stored in S3."""


class S3Service:
    """
    Service for storing person photos in S3.
    """

    def __init__(self):
        """Initialize S3 client with AWS credentials from settings."""
        # Use regional endpoint to ensure signature matches the URL host
        regional_endpoint = f"https://s3.{settings.aws_region}.amazonaws.com"

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            endpoint_url=regional_endpoint,
            config=BotoConfig(
                signature_version='s3v4',
                s3={'addressing_style': 'virtual'},
                connect_timeout=10,
                read_timeout=60,
                retries={'max_attempts': 3}
            )
        )
        self.bucket_name = settings.aws_s3_bucket_name

    @staticmethod
    def is_supported(content_type: str) -> bool:
        return (content_type or "").lower() in EXTENSION_BY_CONTENT_TYPE

    def upload_person_photo(
        self,
        file_content: bytes,
        university_id: str,
        content_type: str = "image/jpeg"
    ) -> str:
        """
        Upload a person's photo and return a pre-signed URL for it.

        Args:
            file_content: Binary content of the image file
            university_id: University ID of the person, used as the object name
            content_type: MIME type of the image

        Returns:
            Pre-signed URL of the uploaded image

        Raises:
            PhotoUploadError: If the upload fails
        """
        extension = EXTENSION_BY_CONTENT_TYPE.get(content_type.lower(), ".jpg")
        object_key = f"persons/{university_id}{extension}"

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=object_key,
                Body=file_content,
                ContentType=content_type
            )
            url = self.s3_client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self.bucket_name,
                    'Key': object_key
                },
                ExpiresIn=settings.photo_url_expiry_seconds
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload photo {object_key} to S3: {str(e)}")
            raise PhotoUploadError(f"Failed to upload photo: {str(e)}") from e

        logger.info(f"Uploaded person photo: {object_key}")
        return url


# Create a singleton instance
s3_service = S3Service()
