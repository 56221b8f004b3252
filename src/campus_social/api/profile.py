"""Profile and follow endpoints."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from campus_social.api.profile_models import (
    FollowRequest,
    FollowResponse,
    MessageResponse,
    ProfileDetailResponse,
    ProfileResponse,
)
from campus_social.domain.errors import UnavailableError, ValidationError
from campus_social.domain.models import ImageUpload, ProfileUpdate, RegistrationForm

if TYPE_CHECKING:
    from campus_social.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])

T = TypeVar("T")


async def _call(request: Request, func: Callable[..., T], *args: object) -> T:
    """Run a blocking service call under the per-request timeout."""
    container: AppContainer = request.app.state.container
    timeout = container.settings.request_timeout_seconds
    try:
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=timeout)
    except TimeoutError as exc:
        logger.warning(
            "Request timed out",
            extra={"path": request.url.path, "timeout_seconds": timeout},
        )
        raise UnavailableError("The request timed out; please retry") from exc


async def _read_image(upload: UploadFile | None) -> ImageUpload | None:
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    return ImageUpload(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type,
    )


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ProfileResponse,
)
async def register(  # noqa: PLR0913
    request: Request,
    first_name: str | None = Form(default=None, alias="firstName"),
    last_name: str | None = Form(default=None, alias="lastName"),
    email: str | None = Form(default=None),
    password: str | None = Form(default=None),
    username: str | None = Form(default=None),
    age: str | None = Form(default=None),
    college: str | None = Form(default=None),
    year_level: str | None = Form(default=None, alias="yearLevel"),
    custom_interests: list[str] | None = Form(default=None, alias="customInterests"),
    categorized_interests: list[str] | None = Form(
        default=None, alias="categorizedInterests"
    ),
    profile_image: UploadFile | None = File(default=None, alias="profileImage"),
) -> ProfileResponse:
    """Register a new user with an optional profile image."""
    form = RegistrationForm(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        username=username,
        age=age,
        college=college,
        year_level=year_level,
        custom_interests=custom_interests,
        categorized_interests=categorized_interests,
    )
    image = await _read_image(profile_image)
    user = await _call(
        request, _container(request).profile_service.register, form, image
    )
    return ProfileResponse.from_record(user)


@router.get("/{user_id}", response_model=ProfileDetailResponse)
async def get_profile(user_id: str, request: Request) -> ProfileDetailResponse:
    """Return a profile with following/followers resolved to usernames."""
    view = await _call(
        request, _container(request).profile_service.get_profile, user_id
    )
    return ProfileDetailResponse.from_view(view)


@router.post("/{user_id}/update", response_model=ProfileResponse)
async def update_profile(  # noqa: PLR0913
    user_id: str,
    request: Request,
    username: str | None = Form(default=None),
    age: str | None = Form(default=None),
    college: str | None = Form(default=None),
    year_level: str | None = Form(default=None, alias="yearLevel"),
    bio: str | None = Form(default=None),
    custom_interests: list[str] | None = Form(default=None, alias="customInterests"),
    categorized_interests: list[str] | None = Form(
        default=None, alias="categorizedInterests"
    ),
    profile_image: UploadFile | None = File(default=None, alias="profileImage"),
) -> ProfileResponse:
    """Partially update a profile; omitted fields keep their prior value."""
    update = ProfileUpdate(
        username=username,
        age=age,
        college=college,
        year_level=year_level,
        bio=bio,
        custom_interests=custom_interests,
        categorized_interests=categorized_interests,
    )
    image = await _read_image(profile_image)
    user = await _call(
        request,
        _container(request).profile_service.update_profile,
        user_id,
        update,
        image,
    )
    return ProfileResponse.from_record(user)


@router.post("/{user_id}/follow", response_model=FollowResponse)
async def follow(
    user_id: str, body: FollowRequest, request: Request
) -> FollowResponse:
    """Make ``user_id`` follow ``followId``."""
    target_id = _require_follow_id(body)
    result = await _call(
        request, _container(request).follow_service.follow, user_id, target_id
    )
    if result.notification_sent:
        message = "User followed and notification sent"
    else:
        message = "User followed; notification pending"
    return FollowResponse(message=message, notification_sent=result.notification_sent)


@router.post("/{user_id}/unfollow", response_model=MessageResponse)
async def unfollow(
    user_id: str, body: FollowRequest, request: Request
) -> MessageResponse:
    """Make ``user_id`` stop following ``followId``."""
    target_id = _require_follow_id(body)
    await _call(
        request, _container(request).follow_service.unfollow, user_id, target_id
    )
    return MessageResponse(message="User unfollowed")


def _require_follow_id(body: FollowRequest) -> str:
    if not body.follow_id or not body.follow_id.strip():
        raise ValidationError("followId is required", fields=["followId"])
    return body.follow_id.strip()
