"""
Unit tests for the media records service.
"""

import pytest

from classgallery.models.media import ADMIN_UPLOADER, MediaItem, MediaStatus, MediaType
from classgallery.services.media import (
    MEDIA_TABLE,
    MediaService,
    filter_by_type,
    media_stats,
    student_visibility_filter,
)
from classgallery.ui.handlers.error import ValidationError


@pytest.fixture
def local_service(local_store, sample_media):
    service = MediaService(store=local_store)
    for item in sample_media:
        service.add_media(item)
    return service


class TestLocalMedia:
    def test_list_all_newest_first(self, local_service):
        assert [item.id for item in local_service.list_all()] == ["m7", "m6", "m5", "m4", "m3", "m2", "m1"]

    def test_student_sees_only_permitted_items(self, local_service):
        assert [item.id for item in local_service.list_for_student("STU001")] == ["m6", "m4", "m2", "m1"]
        assert [item.id for item in local_service.list_for_student("STU002")] == ["m7", "m5", "m3", "m1"]

    def test_unknown_student_sees_shared_items_only(self, local_service):
        assert [item.id for item in local_service.list_for_student("STU999")] == ["m1"]

    def test_list_pending(self, local_service):
        assert [item.id for item in local_service.list_pending()] == ["m7", "m5", "m4"]

    def test_approve_makes_item_visible(self, local_service):
        local_service.approve("m7")

        assert "m7" in {item.id for item in local_service.list_for_student("STU001")}
        assert "m7" not in {item.id for item in local_service.list_pending()}

    def test_reject(self, local_service):
        local_service.reject("m5")

        item = next(item for item in local_service.list_all() if item.id == "m5")
        assert item.status == MediaStatus.REJECTED
        assert "m5" not in {i.id for i in local_service.list_for_student("STU001")}

    def test_delete(self, local_service):
        local_service.delete_media("m1")

        assert "m1" not in {item.id for item in local_service.list_all()}

    def test_add_requires_title_and_url(self, local_service):
        item = MediaItem.create_new(title="", url="https://x/1.jpg", uploaded_by=ADMIN_UPLOADER)

        with pytest.raises(ValidationError):
            local_service.add_media(item)

    def test_version_is_tracked(self, local_service):
        assert local_service.get_version() is not None


class TestRemoteMedia:
    def test_student_query_uses_visibility_filter(self, mock_backend, sample_media):
        mock_backend.select.return_value = [sample_media[0].to_dict()]

        items = MediaService(backend=mock_backend).list_for_student("STU001")

        assert [item.id for item in items] == ["m1"]
        mock_backend.select.assert_called_once_with(
            MEDIA_TABLE, or_filter=student_visibility_filter("STU001"), order="created_at"
        )

    def test_rows_outside_the_rule_are_dropped(self, mock_backend, sample_media):
        mock_backend.select.return_value = [item.to_dict() for item in sample_media]

        items = MediaService(backend=mock_backend).list_for_student("STU001")

        assert {item.id for item in items} == {"m1", "m2", "m4", "m6"}

    def test_add_inserts_row(self, mock_backend):
        item = MediaItem.create_new(title="t", url="https://x/1.jpg", uploaded_by="STU001", student_id="STU001")
        mock_backend.insert.return_value = {"id": "server-id", **item.to_row()}

        stored = MediaService(backend=mock_backend).add_media(item)

        assert stored.id == "server-id"
        assert stored.status == MediaStatus.PENDING
        mock_backend.insert.assert_called_once_with(MEDIA_TABLE, item.to_row())

    def test_set_status(self, mock_backend):
        MediaService(backend=mock_backend).approve("m4")

        mock_backend.update.assert_called_once_with(MEDIA_TABLE, {"status": "approved"}, filters={"id": "m4"})

    def test_pending_query(self, mock_backend):
        MediaService(backend=mock_backend).list_pending()

        mock_backend.select.assert_called_once_with(MEDIA_TABLE, filters={"status": "pending"}, order="created_at")

    def test_version_tracks_status_column(self, mock_backend):
        mock_backend.get_table_signature.return_value = "sig"

        assert MediaService(backend=mock_backend).get_version() == "sig"
        mock_backend.get_table_signature.assert_called_once_with(MEDIA_TABLE, columns="id,status")


class TestVisibilityFilter:
    def test_expression(self):
        assert student_visibility_filter("STU001") == (
            '(and(status.eq.approved,student_id.eq."STU001"),'
            "and(status.eq.approved,student_id.eq.all),"
            'uploaded_by.eq."STU001")'
        )

    def test_quotes_are_escaped(self):
        assert 'student_id.eq."a\\"b"' in student_visibility_filter('a"b')


def test_filter_by_type(sample_media):
    assert [item.id for item in filter_by_type(sample_media, "video")] == ["m2"]
    assert len(filter_by_type(sample_media, "photo")) == 6
    assert len(filter_by_type(sample_media, "all")) == 7


def test_media_stats(sample_media):
    assert media_stats(sample_media) == {"total": 7, "photos": 6, "videos": 1, "pending": 3}
    assert media_stats([]) == {"total": 0, "photos": 0, "videos": 0, "pending": 0}


def test_video_items_keep_their_type(local_store):
    service = MediaService(store=local_store)
    item = MediaItem.create_new(
        title="Clip", url="https://x/v.mp4", uploaded_by=ADMIN_UPLOADER, media_type=MediaType.VIDEO
    )

    service.add_media(item)

    assert service.list_all()[0].type == MediaType.VIDEO
