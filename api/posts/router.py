# router.py
# FastAPI router for the posts RPC procedures

# Procedures are mounted under /api/trpc and named <router>.<procedure>:
#   GET  /api/trpc/posts.getAll   public query
#   POST /api/trpc/posts.create   private mutation, body {"content": "..."}
# Successful calls answer {"result": {"data": ...}}; failures use the error
# envelope from errors.py.

# @see: service.py - Business logic layer
# @see: schemas.py - Request/response Pydantic schemas
# @note: get_current_user_id is resolved before the body is validated, so
#        signed-out callers are rejected before any input checks

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from api.auth import get_current_user_id
from api.db import get_db_session
from api.limiter import AdmissionController, get_admission_controller
from api.profiles import ProfileResolver, get_profile_resolver

from .schemas import CreatePostResponse, FeedResponse, PostCreate
from .service import PostService

router = APIRouter(prefix="/api/trpc", tags=["posts"])


def get_post_service(
    session: Session = Depends(get_db_session),
    profiles: ProfileResolver = Depends(get_profile_resolver),
    admission: AdmissionController = Depends(get_admission_controller),
) -> PostService:
    """Dependency for getting a PostService instance."""
    return PostService(session, profiles, admission)


@router.get("/posts.getAll", response_model=FeedResponse)
def get_all(service: PostService = Depends(get_post_service)):
    """
    Newest posts (at most 100), each with its author's public profile.
    """
    return {"result": {"data": service.get_all()}}


@router.post(
    "/posts.create",
    response_model=CreatePostResponse,
    status_code=status.HTTP_200_OK,
)
def create(
    user_id: str = Depends(get_current_user_id),
    payload: PostCreate = Body(...),
    service: PostService = Depends(get_post_service),
):
    """
    Create a post authored by the signed-in user.

    Content must be 1-280 emoji characters. Authors are limited by the
    post admission policy (3 per minute by default).
    """
    post = service.create(user_id, payload.content)
    return {"result": {"data": post}}
