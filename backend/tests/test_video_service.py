"""
VideoTube Backend - Video Service Unit Tests
==============================================

What we test:
    ✅ Listing: sort whitelist, user_id validation, page envelope
    ✅ Listing SQL: published only, escaped title/description search,
       owner filter, ORDER BY, OFFSET / LIMIT
    ✅ Publish: validation order, declared sizes before any upload,
       both uploads, row created, cleanup on failure
    ✅ Get: joined owner projection, 404, invalid ID
    ✅ Update / delete / toggle: owner checks and media object lifecycle
"""

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.config import settings
from app.exceptions import (
    DatabaseError,
    ForbiddenError,
    MediaHostError,
    NotFoundError,
    ValidationError,
)
from app.models.video import Video
from app.services.media_service import IMAGE, VIDEO, MediaAsset, MediaService
from app.services.video_service import UploadedFile, VideoService

VIDEO_ASSET = MediaAsset(url="https://cdn.example.com/videos/new.mp4", key="videos/new.mp4")
THUMB_ASSET = MediaAsset(url="https://cdn.example.com/thumbnails/new.jpg", key="thumbnails/new.jpg")


def video_upload(content_length=32):
    return UploadedFile(
        filename="clip.mp4", file=BytesIO(b"\x00" * 32), content_length=content_length
    )


def thumb_upload(content_length=3):
    return UploadedFile(
        filename="cover.jpg", file=BytesIO(b"\xff\xd8\xff"), content_length=content_length
    )


def stub_page(session, rows=(), total=None):
    """Queue the COUNT and page results paginate() reads."""
    count_result = MagicMock()
    count_result.scalar_one.return_value = len(rows) if total is None else total
    rows_result = MagicMock()
    rows_result.scalars.return_value.all.return_value = list(rows)
    session.execute.side_effect = [count_result, rows_result]


def page_query(session):
    """The sorted, sliced statement (paginate's second execute)."""
    return session.execute.await_args_list[1].args[0]


@pytest.fixture
def media():
    with patch("app.services.video_service.media_service") as mocked:
        mocked.upload = AsyncMock(side_effect=[VIDEO_ASSET, THUMB_ASSET])
        mocked.delete = AsyncMock()
        mocked.validate_declared_size = MagicMock(
            side_effect=MediaService(client=MagicMock()).validate_declared_size
        )
        yield mocked


class TestListVideos:
    def setup_method(self):
        self.service = VideoService()

    @pytest.mark.asyncio
    async def test_returns_page(self, mock_db_session, make_video):
        count_result = MagicMock()
        count_result.scalar_one.return_value = 1
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = [make_video()]
        mock_db_session.execute.side_effect = [count_result, rows_result]

        page = await self.service.list_videos(mock_db_session, page=1, limit=10, query="fast")

        assert page.total_docs == 1
        assert page.docs[0].title == "Intro to FastAPI"
        assert not hasattr(page.docs[0], "owner")

    @pytest.mark.asyncio
    async def test_invalid_sort_field(self, mock_db_session):
        with pytest.raises(ValidationError, match="Invalid sort field 'password'"):
            await self.service.list_videos(mock_db_session, sort_by="password")
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_sort_type(self, mock_db_session):
        with pytest.raises(ValidationError, match="sort_type"):
            await self.service.list_videos(mock_db_session, sort_type="sideways")

    @pytest.mark.asyncio
    async def test_camel_case_sort_accepted(self, mock_db_session):
        count_result = MagicMock()
        count_result.scalar_one.return_value = 0
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.side_effect = [count_result, rows_result]

        page = await self.service.list_videos(mock_db_session, sort_by="createdAt", sort_type="asc")
        assert page.docs == []
        assert page.total_pages == 1

    @pytest.mark.asyncio
    async def test_invalid_user_id(self, mock_db_session):
        with pytest.raises(ValidationError, match="Invalid User ID"):
            await self.service.list_videos(mock_db_session, user_id="nope")

    @pytest.mark.asyncio
    async def test_database_error_wrapped(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with pytest.raises(DatabaseError):
            await self.service.list_videos(mock_db_session)


    @pytest.mark.asyncio
    async def test_only_published_counted_and_listed(self, mock_db_session, compile_sql):
        stub_page(mock_db_session)

        await self.service.list_videos(mock_db_session)

        count_sql, _ = compile_sql(mock_db_session.execute.await_args_list[0].args[0])
        page_sql, _ = compile_sql(page_query(mock_db_session))
        assert "videos.is_published IS true" in count_sql
        assert "videos.is_published IS true" in page_sql
        assert "ORDER BY videos.created_at DESC, videos.id" in page_sql

    @pytest.mark.asyncio
    async def test_search_matches_title_or_description(self, mock_db_session, compile_sql):
        stub_page(mock_db_session)

        await self.service.list_videos(mock_db_session, query="50%_off")

        sql, params = compile_sql(page_query(mock_db_session))
        where = sql.split("WHERE", 1)[1].split("ORDER BY", 1)[0]
        assert "videos.title" in where
        assert "videos.description" in where
        assert " OR " in where
        assert "LIKE" in where.upper()
        assert "ESCAPE '/'" in where
        # wildcards typed by the user are escaped, one bind per column
        assert list(params.values()).count("50/%/_off") == 2

    @pytest.mark.asyncio
    async def test_user_id_filters_owner(self, mock_db_session, compile_sql):
        stub_page(mock_db_session)
        owner_id = uuid4()

        await self.service.list_videos(mock_db_session, user_id=str(owner_id))

        sql, params = compile_sql(page_query(mock_db_session))
        assert "videos.owner_id = " in sql
        assert owner_id in params.values()
        assert "videos.is_published IS true" in sql

    @pytest.mark.asyncio
    async def test_sort_applied(self, mock_db_session, compile_sql):
        stub_page(mock_db_session)

        await self.service.list_videos(mock_db_session, sort_by="views", sort_type="asc")

        sql, _ = compile_sql(page_query(mock_db_session))
        assert "ORDER BY videos.views ASC, videos.id" in sql

    @pytest.mark.asyncio
    async def test_offset_skips_previous_pages(self, mock_db_session, compile_sql):
        stub_page(mock_db_session, total=30)

        page = await self.service.list_videos(mock_db_session, page=3, limit=5)

        sql, _ = compile_sql(page_query(mock_db_session), literal_binds=True)
        assert "LIMIT 5 OFFSET 10" in sql
        assert page.page == 3
        assert page.total_pages == 6


class TestPublishVideo:
    def setup_method(self):
        self.service = VideoService()

    @pytest.mark.asyncio
    async def test_success(self, mock_db_session, user, media):
        result = await self.service.publish_video(
            mock_db_session, user, "  My video ", "About it", video_upload(), thumb_upload(), 12.5
        )

        assert result.title == "My video"
        assert result.video_file == VIDEO_ASSET.url
        assert result.thumbnail == THUMB_ASSET.url
        assert result.duration == 12.5
        assert result.views == 0
        assert result.is_published is True
        assert result.owner_id == user.id

        kinds = [c.args[0] for c in media.upload.await_args_list]
        assert kinds == [VIDEO, IMAGE]

        stored = mock_db_session.added[0]
        assert isinstance(stored, Video)
        assert stored.video_file_key == VIDEO_ASSET.key
        assert stored.thumbnail_key == THUMB_ASSET.key
        media.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duration_defaults_to_zero(self, mock_db_session, user, media):
        result = await self.service.publish_video(
            mock_db_session, user, "Title", "Desc", video_upload(), thumb_upload()
        )
        assert result.duration == 0.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "title,description,video_file,thumbnail,message",
        [
            ("", "desc", True, True, "Title and description are required"),
            ("title", "   ", True, True, "Title and description are required"),
            ("title", "desc", False, True, "Video file is missing"),
            ("title", "desc", True, False, "Thumbnail is missing"),
            ("", "desc", False, False, "Title and description are required"),
        ],
    )
    async def test_validation_order(
        self, mock_db_session, user, media, title, description, video_file, thumbnail, message
    ):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.publish_video(
                mock_db_session,
                user,
                title,
                description,
                video_upload() if video_file else None,
                thumb_upload() if thumbnail else None,
            )
        assert exc_info.value.message == message
        media.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_negative_duration(self, mock_db_session, user, media):
        with pytest.raises(ValidationError, match="Duration cannot be negative"):
            await self.service.publish_video(
                mock_db_session, user, "T", "D", video_upload(), thumb_upload(), -1
            )

    @pytest.mark.asyncio
    async def test_oversized_thumbnail_rejected_before_any_upload(
        self, mock_db_session, user, media
    ):
        with pytest.raises(ValidationError, match="maximum size"):
            await self.service.publish_video(
                mock_db_session,
                user,
                "T",
                "D",
                video_upload(),
                thumb_upload(content_length=settings.max_image_size + 1),
            )
        media.upload.assert_not_awaited()
        media.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_oversized_video_rejected_before_any_upload(self, mock_db_session, user, media):
        with pytest.raises(ValidationError, match="maximum size"):
            await self.service.publish_video(
                mock_db_session,
                user,
                "T",
                "D",
                video_upload(content_length=settings.max_video_size + 1),
                thumb_upload(),
            )
        media.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_thumbnail_failure_removes_video_object(self, mock_db_session, user, media):
        media.upload.side_effect = [VIDEO_ASSET, MediaHostError(message="Image upload failed.")]

        with pytest.raises(MediaHostError):
            await self.service.publish_video(
                mock_db_session, user, "T", "D", video_upload(), thumb_upload()
            )

        media.delete.assert_awaited_once_with(VIDEO_ASSET.key)
        assert mock_db_session.added == []

    @pytest.mark.asyncio
    async def test_insert_failure_removes_both_objects(self, mock_db_session, user, media):
        mock_db_session.flush.side_effect = OperationalError("INSERT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.publish_video(
                mock_db_session, user, "T", "D", video_upload(), thumb_upload()
            )

        deleted = [c.args[0] for c in media.delete.await_args_list]
        assert deleted == [VIDEO_ASSET.key, THUMB_ASSET.key]


class TestGetVideo:
    def setup_method(self):
        self.service = VideoService()

    @pytest.mark.asyncio
    async def test_found_with_owner(self, mock_db_session, make_video, user):
        video = make_video()
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = video

        result = await self.service.get_video(mock_db_session, str(video.id))

        assert result.id == video.id
        assert result.owner.username == user.username
        assert result.owner.email == user.email

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db_session):
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = None
        with pytest.raises(NotFoundError, match="Video not found"):
            await self.service.get_video(mock_db_session, str(uuid4()))

    @pytest.mark.asyncio
    async def test_invalid_id(self, mock_db_session):
        with pytest.raises(ValidationError, match="Invalid Video ID"):
            await self.service.get_video(mock_db_session, "xyz")
        mock_db_session.execute.assert_not_awaited()


class TestUpdateVideo:
    def setup_method(self):
        self.service = VideoService()

    @pytest.mark.asyncio
    async def test_title_only(self, mock_db_session, make_video, user, media):
        video = make_video()
        mock_db_session.get.return_value = video

        result = await self.service.update_video(mock_db_session, user, str(video.id), title=" New ")

        assert result.title == "New"
        assert result.description == "Building APIs quickly"
        media.upload.assert_not_awaited()
        media.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_thumbnail_replaced_and_old_object_deleted(
        self, mock_db_session, make_video, user, media
    ):
        video = make_video()
        old_key = video.thumbnail_key
        mock_db_session.get.return_value = video
        media.upload.side_effect = [THUMB_ASSET]

        result = await self.service.update_video(
            mock_db_session, user, str(video.id), thumbnail=thumb_upload()
        )

        assert result.thumbnail == THUMB_ASSET.url
        assert video.thumbnail_key == THUMB_ASSET.key
        media.delete.assert_awaited_once_with(old_key)

    @pytest.mark.asyncio
    async def test_nothing_to_update(self, mock_db_session, user):
        with pytest.raises(ValidationError, match="At least one field is required to update"):
            await self.service.update_video(mock_db_session, user, str(uuid4()), title="  ")

    @pytest.mark.asyncio
    async def test_invalid_id_checked_first(self, mock_db_session, user):
        with pytest.raises(ValidationError, match="Invalid Video ID"):
            await self.service.update_video(mock_db_session, user, "bad")

    @pytest.mark.asyncio
    async def test_not_owner(self, mock_db_session, make_video, user, other_user, media):
        video = make_video(owner=other_user)
        mock_db_session.get.return_value = video

        with pytest.raises(ForbiddenError, match="Unauthorized request"):
            await self.service.update_video(
                mock_db_session, user, str(video.id), title="Mine now", thumbnail=thumb_upload()
            )
        assert video.title == "Intro to FastAPI"
        media.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing(self, mock_db_session, user):
        with pytest.raises(NotFoundError):
            await self.service.update_video(mock_db_session, user, str(uuid4()), title="x")


class TestDeleteVideo:
    def setup_method(self):
        self.service = VideoService()

    @pytest.mark.asyncio
    async def test_owner_deletes_row_and_media(self, mock_db_session, make_video, user, media):
        video = make_video()
        mock_db_session.get.return_value = video

        await self.service.delete_video(mock_db_session, user, str(video.id))

        mock_db_session.delete.assert_awaited_once_with(video)
        deleted = [c.args[0] for c in media.delete.await_args_list]
        assert deleted == [video.video_file_key, video.thumbnail_key]

    @pytest.mark.asyncio
    async def test_not_owner(self, mock_db_session, make_video, user, other_user, media):
        video = make_video(owner=other_user)
        mock_db_session.get.return_value = video

        with pytest.raises(ForbiddenError):
            await self.service.delete_video(mock_db_session, user, str(video.id))
        mock_db_session.delete.assert_not_awaited()
        media.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing(self, mock_db_session, user):
        with pytest.raises(NotFoundError):
            await self.service.delete_video(mock_db_session, user, str(uuid4()))


class TestTogglePublish:
    def setup_method(self):
        self.service = VideoService()

    @pytest.mark.asyncio
    async def test_flips_twice(self, mock_db_session, make_video, user):
        video = make_video(is_published=True)
        mock_db_session.get.return_value = video

        first = await self.service.toggle_publish(mock_db_session, user, str(video.id))
        second = await self.service.toggle_publish(mock_db_session, user, str(video.id))

        assert first.is_published is False
        assert second.is_published is True

    @pytest.mark.asyncio
    async def test_not_owner(self, mock_db_session, make_video, user, other_user):
        video = make_video(owner=other_user)
        mock_db_session.get.return_value = video

        with pytest.raises(ForbiddenError, match="Unauthorized to toggle status"):
            await self.service.toggle_publish(mock_db_session, user, str(video.id))
        assert video.is_published is True
