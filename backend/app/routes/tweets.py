"""VideoTube Backend - Tweet Route Handlers (/api/v1/tweets)."""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user
from app.database import get_db_session
from app.models.user import User
from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.tweet import TweetCreate, TweetResponse, TweetUpdate, TweetWithOwner
from app.services.tweet_service import tweet_service

router = APIRouter(
    prefix="/api/v1/tweets",
    tags=["Tweets"],
    dependencies=[Depends(get_current_user)],
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    },
)

OWNER_RESPONSES = {
    403: {"description": "Not the author", "model": ErrorResponse},
    404: {"description": "Tweet not found", "model": ErrorResponse},
}


@router.post("", status_code=201, response_model=ApiResponse[TweetResponse], summary="Post a tweet")
async def create_tweet(
    body: TweetCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    tweet = await tweet_service.create_tweet(db, user, body.content)
    return ApiResponse.ok(tweet, "Tweet created successfully", status_code=201)


@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[List[TweetWithOwner]],
    summary="A user's tweets, newest first",
)
async def get_user_tweets(user_id: str, db: AsyncSession = Depends(get_db_session)):
    tweets = await tweet_service.list_user_tweets(db, user_id)
    return ApiResponse.ok(tweets, "User tweets fetched successfully")


@router.patch(
    "/{tweet_id}",
    response_model=ApiResponse[TweetResponse],
    responses=OWNER_RESPONSES,
    summary="Edit your tweet",
)
async def update_tweet(
    tweet_id: str,
    body: TweetUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    tweet = await tweet_service.update_tweet(db, user, tweet_id, body.content)
    return ApiResponse.ok(tweet, "Tweet updated successfully")


@router.delete(
    "/{tweet_id}",
    response_model=ApiResponse[Dict[str, Any]],
    responses=OWNER_RESPONSES,
    summary="Delete your tweet",
)
async def delete_tweet(
    tweet_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await tweet_service.delete_tweet(db, user, tweet_id)
    return ApiResponse.ok({}, "Tweet deleted successfully")
