"""
Unit tests for the MediaItem model.
"""

import pytest

from classgallery.models.media import (
    ADMIN_UPLOADER,
    ALL_STUDENTS,
    MediaItem,
    MediaStatus,
    MediaType,
    media_type_for_mime,
)


class TestMediaCreation:
    def test_admin_upload_is_approved(self):
        item = MediaItem.create_new(title="Sports day", url="https://x/1.jpg", uploaded_by=ADMIN_UPLOADER)

        assert item.status == MediaStatus.APPROVED
        assert item.student_id == ALL_STUDENTS

    def test_student_upload_is_pending(self):
        item = MediaItem.create_new(
            title="My drawing", url="https://x/2.jpg", uploaded_by="STU001", student_id="STU001"
        )

        assert item.status == MediaStatus.PENDING
        assert item.uploaded_by == "STU001"

    def test_blank_audience_means_everyone(self):
        item = MediaItem.create_new(title="t", url="u", uploaded_by=ADMIN_UPLOADER, student_id="")

        assert item.student_id == ALL_STUDENTS

    @pytest.mark.parametrize(
        "mime_type,expected",
        [
            ("video/mp4", MediaType.VIDEO),
            ("VIDEO/QuickTime", MediaType.VIDEO),
            ("image/png", MediaType.PHOTO),
            (None, MediaType.PHOTO),
        ],
    )
    def test_media_type_for_mime(self, mime_type, expected):
        assert media_type_for_mime(mime_type) == expected


class TestMediaVisibility:
    def test_visibility_rule(self, sample_media):
        visible = {item.id for item in sample_media if item.is_visible_to("STU001")}

        # Shared and targeted approved items, plus every own upload.
        assert visible == {"m1", "m2", "m4", "m6"}

    def test_other_students_pending_is_hidden(self, sample_media):
        pending_for_everyone = next(item for item in sample_media if item.id == "m7")

        assert not pending_for_everyone.is_visible_to("STU001")
        assert pending_for_everyone.is_visible_to("STU002")

    def test_approved_item_for_other_student_is_hidden(self, sample_media):
        other = next(item for item in sample_media if item.id == "m3")

        assert not other.is_visible_to("STU001")


class TestMediaRows:
    def test_to_row_serialises_enums(self, sample_media):
        row = sample_media[1].to_row()

        assert row["type"] == "video"
        assert row["status"] == "approved"
        assert "id" not in row

    def test_round_trip_through_local_dict(self, sample_media):
        item = sample_media[3]

        assert MediaItem.from_dict(item.to_dict()) == item

    def test_legacy_row_defaults_to_approved_admin_upload(self):
        item = MediaItem.from_row(
            {"id": 9, "title": "Old", "type": "photo", "url": "u", "student_id": "all", "created_at": "2023-01-01"}
        )

        assert item.status == MediaStatus.APPROVED
        assert item.uploaded_by == ADMIN_UPLOADER
        assert item.uploaded_by_admin
        assert item.id == "9"

    def test_audience_label(self, sample_media):
        assert sample_media[0].audience_label() == "All students"

        sample_media[1].student_name = "Asha Rao"
        assert sample_media[1].audience_label() == "Asha Rao"
        assert sample_media[2].audience_label() == "STU002"
