from __future__ import annotations

import base64

import streamlit as st

from pdf_combine.adapters.dialogs import TkFileDialogs
from pdf_combine.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_combine.adapters.share import DownloadShareTarget
from pdf_combine.domain.errors import PdfCombineError, RenderError
from pdf_combine.domain.models import BatchOperationResult, PageRef, Status
from pdf_combine.infrastructure.config import AppConfig
from pdf_combine.infrastructure.file_io import resolve_file_writer
from pdf_combine.infrastructure.logging_config import setup_logging
from pdf_combine.services.combine_session import CombineSession
from pdf_combine.services.merge_service import MergeService
from pdf_combine.services.save_service import SaveDispatcher
from pdf_combine.services.thumbnail_service import ThumbnailService
from pdf_combine.services.workspace_service import WorkspaceService


def _init_services() -> tuple[AppConfig, PyMuPdfAdapter, MergeService]:
    config = AppConfig()
    setup_logging(config.log_level)
    adapter = PyMuPdfAdapter()
    merge_service = MergeService(adapter)
    return config, adapter, merge_service


def _init_state(config: AppConfig, adapter: PyMuPdfAdapter) -> None:
    if "combine_session" not in st.session_state:
        session = CombineSession(adapter)
        st.session_state.combine_session = session
        st.session_state.thumbnails = ThumbnailService(
            adapter, session.manager, width=config.thumbnail_width
        )
    st.session_state.setdefault("share_target", DownloadShareTarget())
    st.session_state.setdefault("upload_token", 0)


def _session() -> CombineSession:
    return st.session_state.combine_session


def _thumbnail_html(image_bytes: bytes | None, caption: str) -> str:
    if image_bytes is None:
        body = (
            "<div style='height:160px;display:flex;align-items:center;"
            "justify-content:center;color:#888;'>Loading…</div>"
        )
    else:
        encoded = base64.b64encode(image_bytes).decode("ascii")
        body = (
            "<div style='display:flex;justify-content:center;'>"
            f"<img src='data:image/png;base64,{encoded}' "
            "style='width:100%;height:auto;border-radius:6px;'/>"
            "</div>"
        )
    return (
        "<div style='border:1px solid rgba(120,120,120,0.35);"
        " border-radius:10px;padding:8px;background:rgba(250,250,250,0.75);'>"
        "<div style='text-align:center;font-size:0.85rem;"
        f"font-weight:600;margin-bottom:6px;'>{caption}</div>"
        f"{body}"
        "</div>"
    )


def _auto_thumbnail_columns(page_count: int) -> int:
    if page_count <= 1:
        return 1
    if page_count <= 4:
        return 2
    if page_count <= 9:
        return 3
    if page_count <= 16:
        return 4
    return 5


def _show_load_report(result: BatchOperationResult) -> None:
    if result.success_count:
        st.success(f"Loaded {result.success_count} PDF(s).")
    for item in result.items:
        if item.status == Status.ERROR:
            details = " | ".join(message.text for message in item.messages)
            st.error(f"{item.source_name}: {details}")


def _sources_panel(config: AppConfig, workspace_service: WorkspaceService) -> None:
    st.subheader("Input PDFs", anchor=False)

    uploaded = st.file_uploader(
        (
            "Add one or more PDFs "
            f"(max {config.max_pdf_size_mb} MB each, "
            f"{config.max_batch_size_mb} MB total)"
        ),
        type=["pdf"],
        accept_multiple_files=True,
        key=f"workspace_upload_{st.session_state.upload_token}",
    )
    col_add, col_browse = st.columns(2)
    with col_add:
        if st.button("Add Uploaded PDFs", type="primary", use_container_width=True):
            try:
                files = [(item.name, item.getvalue()) for item in uploaded] if uploaded else []
                if not files:
                    st.warning("Upload a PDF first.")
                else:
                    _show_load_report(workspace_service.load_uploads(files))
                    st.session_state.upload_token += 1
            except PdfCombineError as exc:
                st.error(str(exc))
    with col_browse:
        if config.direct_file_save and st.button("Open from disk…", use_container_width=True):
            try:
                selected = TkFileDialogs().pick_pdf_files()
                if selected:
                    _show_load_report(workspace_service.load_paths(selected))
            except PdfCombineError as exc:
                st.error(str(exc))

    session = _session()
    documents = session.manager.documents()
    if not documents:
        st.info("No PDFs added yet.")
        return

    st.caption(
        "A PDF is closed once none of its pages are in the output. "
        "Upload it again to reuse its pages."
    )
    retained = workspace_service.retained_page_counts()
    for entry in documents:
        st.markdown(
            f"**{entry.name}**  \n"
            f"{retained.get(entry.document_id, 0)} / {entry.page_count} pages in output"
        )
        with st.form(key=f"add_pages_form_{entry.document_id}"):
            page_spec = st.text_input(
                "Add pages again",
                placeholder="Examples: 1,3,5-8",
                key=f"add_pages_text_{entry.document_id}",
            )
            if st.form_submit_button("Add Pages"):
                try:
                    added = workspace_service.add_pages(entry.document_id, page_spec)
                    st.success(f"Added {added} page(s).")
                    st.rerun()
                except PdfCombineError as exc:
                    st.error(str(exc))
        if st.button("Remove PDF", key=f"remove_pdf_{entry.document_id}"):
            session.page_list.remove_document(entry.document_id)
            st.rerun()
        st.divider()


def _page_card(index: int, page_ref: PageRef, total: int) -> None:
    session = _session()
    entry = session.manager.get_document(page_ref.document_id)
    source = entry.name if entry is not None else page_ref.document_id
    caption = f"#{index + 1} · {source} p.{page_ref.page_index + 1}"
    thumbnails: ThumbnailService = st.session_state.thumbnails
    image = thumbnails.thumbnail_or_none(page_ref)
    st.markdown(_thumbnail_html(image, caption), unsafe_allow_html=True)

    col_left, col_remove, col_right = st.columns(3)
    try:
        if col_left.button("◀", key=f"left_{page_ref.ref_id}", disabled=index == 0):
            session.page_list.move(index, index - 1)
            st.rerun()
        if col_remove.button("✕", key=f"remove_{page_ref.ref_id}"):
            session.page_list.remove_at(index)
            st.rerun()
        if col_right.button("▶", key=f"right_{page_ref.ref_id}", disabled=index == total - 1):
            session.page_list.move(index, index + 1)
            st.rerun()
    except PdfCombineError as exc:
        st.error(str(exc))


def _arrange_panel(workspace_service: WorkspaceService) -> None:
    st.subheader("Arrange Pages", anchor=False)
    session = _session()
    page_refs = list(session.page_list)
    if not page_refs:
        st.info("The page list is empty. Add PDFs to start.")
        return

    total = len(page_refs)
    st.caption(f"{total} page(s) in output order.")

    with st.expander("Quick reorder / remove", expanded=False):
        with st.form(key="reorder_form"):
            order_spec = st.text_input(
                "New order",
                value=",".join(str(position) for position in range(1, total + 1)),
                key=f"reorder_text_{abs(hash(session.page_list.signature()))}",
            )
            if st.form_submit_button("Apply Order"):
                try:
                    workspace_service.apply_order(order_spec)
                    st.rerun()
                except PdfCombineError as exc:
                    st.error(str(exc))
        with st.form(key="remove_multi_form"):
            remove_spec = st.text_input(
                "Remove positions", placeholder="Examples: 1,3,5-8", key="remove_multi_text"
            )
            if st.form_submit_button("Remove Selected Pages"):
                try:
                    removed = workspace_service.remove_positions(remove_spec)
                    st.success(f"Removed {removed} page(s).")
                    st.rerun()
                except PdfCombineError as exc:
                    st.error(str(exc))

    columns_per_row = _auto_thumbnail_columns(total)
    cols = st.columns(columns_per_row, gap="small")
    for index, page_ref in enumerate(page_refs):
        with cols[index % columns_per_row]:
            _page_card(index, page_ref, total)


def _preview_panel(config: AppConfig, merge_service: MergeService) -> None:
    st.subheader("Combined PDF Preview", anchor=False)
    session = _session()
    share_target: DownloadShareTarget = st.session_state.share_target

    if st.button(
        "Combine PDFs",
        type="primary",
        use_container_width=True,
        disabled=len(session.page_list) == 0,
    ):
        try:
            result = session.generate(merge_service)
            share_target.clear()
            st.success(f"Combined {result.merged_pages} pages successfully!")
        except PdfCombineError as exc:
            st.error(f"Error combining PDFs: {exc}")

    if session.output is None:
        st.info("No combined PDF yet. Click Combine PDFs to build it.")
        return
    if not session.output_is_current():
        st.warning("The page list changed since this PDF was combined. Combine again to update.")

    output = session.output
    st.caption(f"{output.merged_pages} page(s), {round(len(output.output_pdf) / 1024, 1)} KB")

    dispatcher = SaveDispatcher(
        direct_file_save=config.direct_file_save,
        picker=TkFileDialogs(),
        writer=resolve_file_writer(config.direct_file_save),
        share_target=share_target,
    )
    if st.button("Save Combined PDF", use_container_width=True):
        try:
            outcome = dispatcher.save(output.output_pdf)
            if outcome.status == Status.SUCCESS:
                st.success(outcome.message)
        except PdfCombineError as exc:
            st.error(f"Error saving PDF: {exc}")

    if share_target.pending is not None:
        st.download_button(
            f"Download {share_target.pending.name}",
            data=share_target.pending.data,
            file_name=share_target.pending.name,
            mime=share_target.pending.mime_type,
            type="primary",
            use_container_width=True,
        )

    thumbnails: ThumbnailService = st.session_state.thumbnails
    try:
        previews = thumbnails.preview(output.output_pdf, config.preview_pages)
    except RenderError as exc:
        st.error(str(exc))
        return
    columns_per_row = _auto_thumbnail_columns(len(previews))
    cols = st.columns(columns_per_row, gap="small")
    for index, preview in enumerate(previews):
        with cols[index % columns_per_row]:
            st.markdown(_thumbnail_html(preview, f"Page {index + 1}"), unsafe_allow_html=True)
    if output.merged_pages > len(previews):
        st.caption(f"Showing the first {len(previews)} of {output.merged_pages} pages.")


def main() -> None:
    st.set_page_config(page_title="PDF Combine", layout="wide")
    st.title("PDF Combine", anchor=False)

    config, adapter, merge_service = _init_services()
    _init_state(config, adapter)
    session = _session()
    workspace_service = WorkspaceService(session.manager, session.page_list, config)

    if st.sidebar.button("New (Reset Workspace)"):
        session.reset()
        st.session_state.share_target.clear()
        st.session_state.upload_token += 1
        st.rerun()
    st.sidebar.caption(
        "Save mode: " + ("save to disk" if config.direct_file_save else "browser download")
    )

    tab_arrange, tab_preview = st.tabs(["Select & Arrange", "Preview & Save"])

    with tab_arrange:
        _sources_panel(config, workspace_service)
        _arrange_panel(workspace_service)

    with tab_preview:
        _preview_panel(config, merge_service)


if __name__ == "__main__":
    main()
