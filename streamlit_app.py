from __future__ import annotations

import streamlit as st

from app.infrastructure.config import get_settings
from app.infrastructure.logging import configure_logging_from_settings, get_logger

# UI modules
from app.ui import styles
from app.ui.checkin import build_checkin
from app.ui.state_keys import SHARE_BASE_URL

logger = get_logger(__name__)


def load_share_base_url_from_secrets() -> str | None:
    """Read the public share URL from Streamlit secrets, falling back to settings."""
    try:
        url = st.secrets.get("app", {}).get("public_base_url")
    except FileNotFoundError:
        url = None
    return url or get_settings().app.public_base_url


@st.cache_resource
def configure_logging() -> None:
    """Configure logging once per server process, not on every rerun."""
    configure_logging_from_settings(get_settings().logging)


def main() -> None:
    settings = get_settings()
    configure_logging()
    st.set_page_config(page_title=settings.app.title, page_icon="💗", layout="centered")
    styles.inject()

    if SHARE_BASE_URL not in st.session_state:
        st.session_state[SHARE_BASE_URL] = load_share_base_url_from_secrets()

    build_checkin()


if __name__ == "__main__":
    main()
