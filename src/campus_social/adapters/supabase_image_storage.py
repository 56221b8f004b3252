"""Supabase Storage-backed profile image storage."""

from dataclasses import dataclass

from supabase import Client

from campus_social.services.images import ImageStorage, build_object_name


@dataclass
class SupabaseImageStorage(ImageStorage):
    """Upload profile images to a Supabase Storage bucket."""

    client: Client
    bucket: str

    def store(self, filename: str, content: bytes, content_type: str | None) -> str:
        """Upload the image and return its object path within the bucket."""
        path = f"profiles/{build_object_name(filename)}"
        self.client.storage.from_(self.bucket).upload(
            path=path,
            file=content,
            file_options={"content-type": content_type or "application/octet-stream"},
        )
        return path

    def delete(self, handle: str) -> None:
        """Remove the object from the bucket."""
        self.client.storage.from_(self.bucket).remove([handle])
