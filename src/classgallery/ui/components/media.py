"""Media grid components for classgallery."""

from collections.abc import Callable

import streamlit as st
import structlog

from classgallery.models.media import MediaItem, MediaStatus, MediaType

logger = structlog.get_logger(__name__)

MediaAction = Callable[[MediaItem], None]

TYPE_BADGES = {
    MediaType.PHOTO: "📷 Photo",
    MediaType.VIDEO: "🎬 Video",
}

STATUS_BADGES = {
    MediaStatus.PENDING: "⏳ Pending",
    MediaStatus.APPROVED: "✅ Approved",
    MediaStatus.REJECTED: "❌ Rejected",
}


def type_badge(item: MediaItem) -> str:
    return TYPE_BADGES.get(item.type, item.type.value)


def status_badge(item: MediaItem) -> str:
    return STATUS_BADGES.get(item.status, item.status.value)


def media_caption(item: MediaItem, show_audience: bool = False) -> str:
    """
    Caption line under a grid tile.

    Args:
        item: Media record
        show_audience: Append who the item is addressed to (admin views)

    Returns:
        str: e.g. ``📷 Photo • 2024-05-01 • All students``
    """
    parts = [type_badge(item), item.created_at.strftime("%Y-%m-%d")]
    if show_audience:
        parts.append(item.audience_label())
    return " • ".join(parts)


def render_media_content(item: MediaItem) -> None:
    """Render the photo or video itself."""
    if item.type == MediaType.VIDEO:
        st.video(item.url)
    else:
        st.image(item.url, use_container_width=True)


@st.dialog(title="Preview", width="large")
def show_media_preview(item: MediaItem) -> None:
    render_media_content(item)
    st.markdown(f"### {item.title}")
    if item.description:
        st.write(item.description)
    st.caption(media_caption(item, show_audience=True))


def _run_action(action: MediaAction, item: MediaItem, event: str) -> None:
    try:
        action(item)
    except Exception as e:
        logger.error(f"{event}_failed", media_id=item.id, error=str(e))
        st.error(f"Could not update '{item.title}': {e}")
        return

    logger.info(event, media_id=item.id)
    st.rerun()


def render_media_tile(
    item: MediaItem,
    key_prefix: str,
    show_status: bool = False,
    show_audience: bool = False,
    on_delete: MediaAction | None = None,
    on_approve: MediaAction | None = None,
    on_reject: MediaAction | None = None,
) -> None:
    """
    Render one grid tile with its badges and action buttons.

    Action callbacks are run on click and followed by a rerun so the grid
    reflects the change.
    """
    with st.container(border=True):
        render_media_content(item)
        st.markdown(f"**{item.title}**")
        st.caption(media_caption(item, show_audience=show_audience))

        if show_status:
            st.caption(status_badge(item))

        if item.description:
            with st.expander("Description"):
                st.write(item.description)

        if st.button("🔍 Preview", key=f"{key_prefix}_preview_{item.id}", use_container_width=True):
            show_media_preview(item)

        if on_approve is not None or on_reject is not None:
            col1, col2 = st.columns(2)
            with col1:
                if on_approve is not None and st.button(
                    "✅ Approve", key=f"{key_prefix}_approve_{item.id}", use_container_width=True, type="primary"
                ):
                    _run_action(on_approve, item, "media_approved_from_grid")
            with col2:
                if on_reject is not None and st.button(
                    "❌ Reject", key=f"{key_prefix}_reject_{item.id}", use_container_width=True
                ):
                    _run_action(on_reject, item, "media_rejected_from_grid")

        if on_delete is not None:
            if st.button("🗑️ Delete", key=f"{key_prefix}_delete_{item.id}", use_container_width=True):
                _run_action(on_delete, item, "media_deleted_from_grid")


def render_media_grid(
    items: list[MediaItem],
    key_prefix: str = "media",
    cols_per_row: int = 3,
    show_status: bool = False,
    show_audience: bool = False,
    on_delete: MediaAction | None = None,
    on_approve: MediaAction | None = None,
    on_reject: MediaAction | None = None,
) -> None:
    """
    Render media records in a grid layout.

    Args:
        items: Media records, already filtered and ordered
        key_prefix: Prefix for widget keys so several grids can share a page
        cols_per_row: Tiles per row
        show_status: Show the moderation badge on each tile
        show_audience: Show who each item is addressed to
        on_delete / on_approve / on_reject: Optional tile actions
    """
    for i in range(0, len(items), cols_per_row):
        cols = st.columns(cols_per_row)

        for j, col in enumerate(cols):
            index = i + j
            with col:
                if index < len(items):
                    render_media_tile(
                        items[index],
                        key_prefix=key_prefix,
                        show_status=show_status,
                        show_audience=show_audience,
                        on_delete=on_delete,
                        on_approve=on_approve,
                        on_reject=on_reject,
                    )
                else:
                    st.empty()


def render_media_stats(stats: dict[str, int], show_pending: bool = True) -> None:
    """Metric row for ``media_stats`` counts."""
    cols = st.columns(4 if show_pending else 3)
    cols[0].metric("Total", stats.get("total", 0))
    cols[1].metric("Photos", stats.get("photos", 0))
    cols[2].metric("Videos", stats.get("videos", 0))
    if show_pending:
        cols[3].metric("Pending", stats.get("pending", 0))
