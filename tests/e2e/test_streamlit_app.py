from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from pdf_combine.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_combine.services.combine_session import CombineSession
from pdf_combine.services.thumbnail_service import ThumbnailService

APP_PATH = Path(__file__).resolve().parents[2] / "app" / "main.py"


@pytest.mark.e2e
def test_card_for_released_document_shows_placeholder(
    session: CombineSession, adapter: PyMuPdfAdapter, doc_a, doc_b
) -> None:
    thumbnails = ThumbnailService(adapter, session.manager, width=80)
    a_id = session.manager.load("a.pdf", doc_a)
    stale_ref = session.page_list.add_all_pages(a_id)[0]
    session.manager.dispose_all()
    b_id = session.manager.load("b.pdf", doc_b)
    session.page_list.add_all_pages(b_id)

    at = AppTest.from_file(str(APP_PATH), default_timeout=30)
    at.session_state["combine_session"] = session
    at.session_state["thumbnails"] = thumbnails
    at.run()

    assert not at.exception
    cards = [element.value for element in at.markdown]
    stale_cards = [card for card in cards if f"{stale_ref.document_id} p.1" in card]
    assert len(stale_cards) == 1
    assert "Loading…" in stale_cards[0]
    assert any("b.pdf p.1" in card and "data:image/png;base64" in card for card in cards)
    assert any("Upload it again" in caption.value for caption in at.caption)
