"""Card container: a titled bordered block with optional body content."""

from typing import Callable, Optional

import streamlit as st


def render_card(title: str, body: Optional[Callable[[], None]] = None, key: Optional[str] = None) -> None:
    with st.container(border=True, key=key):
        st.markdown(f"#### {title}")
        if body is not None:
            body()
