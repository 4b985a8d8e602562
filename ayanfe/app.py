"""
Streamlit page: account, badges, achievements and API access.

Run with:
    streamlit run ayanfe/app.py
"""

import streamlit as st

from ayanfe.config import configure_logging, get_settings
from ayanfe.components import PanelBuilder
from ayanfe.state import ApiKeyManager, Notifier, ProgressManager, SessionManager
from ayanfe.utils import APIClient

st.set_page_config(
    page_title="AYANFE AI",
    page_icon="🏅",
    layout="wide",
    initial_sidebar_state="expanded"
)


def init_session_state():
    """Build the managers once per browser session"""
    if "session" in st.session_state:
        return

    settings = get_settings()
    configure_logging(settings)

    client = APIClient(settings)
    notifier = Notifier(history_size=settings.notification_history)
    session = SessionManager(client, notifier)

    st.session_state.settings = settings
    st.session_state.client = client
    st.session_state.notifier = notifier
    st.session_state.pending_toasts = []
    notifier.on_notify(st.session_state.pending_toasts.append)

    st.session_state.session = session
    st.session_state.progress = ProgressManager(client, session, notifier, settings)
    st.session_state.api_keys = ApiKeyManager(client, session, notifier)


def flush_toasts():
    pending = st.session_state.pending_toasts
    while pending:
        notification = pending.pop(0)
        text = f"**{notification.title}**"
        if notification.description:
            text += f"  \n{notification.description}"
        st.toast(text, icon=notification.variant.icon)


init_session_state()

st.session_state.connected = st.session_state.client.is_connected()

session: SessionManager = st.session_state.session
progress: ProgressManager = st.session_state.progress
api_keys: ApiKeyManager = st.session_state.api_keys

with st.sidebar:
    st.title("AYANFE AI")
    if session.is_authenticated:
        PanelBuilder.render_identity_panel(session)
    else:
        PanelBuilder.render_login_panel(session)
    PanelBuilder.render_status_panel(st.session_state.connected, progress, st.session_state.notifier)

PanelBuilder.render_celebration(progress)

tab_names = ["Badges", "Achievements"]
if session.is_authenticated:
    tab_names.append("API Access")
tabs = st.tabs(tab_names)

with tabs[0]:
    PanelBuilder.render_badges_panel(progress, session.is_authenticated)

with tabs[1]:
    PanelBuilder.render_achievements_panel(progress, session.is_authenticated)

if session.is_authenticated:
    with tabs[2]:
        PanelBuilder.render_api_keys_panel(api_keys)

flush_toasts()
