"""
Panel Components
Streamlit panels that read from the state managers and forward user actions.
"""

import streamlit as st

from ..state import ApiKeyManager, Notifier, ProgressManager, SessionManager
from ..utils.errors import ClientError
from .charts import ChartBuilder


class PanelBuilder:
    """Build sidebar and page panels"""

    @staticmethod
    def progress_fraction(progress: int, completed: bool = False) -> float:
        """Percentage progress as the 0.0-1.0 fraction st.progress takes"""
        if completed:
            return 1.0
        return min(max(progress, 0), 100) / 100

    @staticmethod
    def render_login_panel(session: SessionManager) -> None:
        """Login / register forms for anonymous visitors"""
        login_tab, register_tab = st.tabs(["Login", "Register"])

        with login_tab:
            with st.form("login_form"):
                username = st.text_input("Username")
                password = st.text_input("Password", type="password")
                submitted = st.form_submit_button("Sign in")
            if submitted:
                try:
                    session.login({"identifier": username, "secret": password})
                    st.rerun()
                except ClientError:
                    # notification already raised; keep the form open
                    pass
                except ValueError as e:
                    st.error(str(e))

        with register_tab:
            with st.form("register_form"):
                username = st.text_input("Username", key="reg_username")
                name = st.text_input("Display name", key="reg_name")
                email = st.text_input("Email", key="reg_email")
                password = st.text_input("Password", type="password", key="reg_password")
                submitted = st.form_submit_button("Create account")
            if submitted:
                try:
                    session.register({
                        "username": username,
                        "password": password,
                        "name": name or None,
                        "email": email or None,
                    })
                    st.rerun()
                except ClientError:
                    pass
                except ValueError as e:
                    st.error(str(e))

    @staticmethod
    def render_identity_panel(session: SessionManager) -> None:
        identity = session.current_identity
        if identity is None:
            return
        st.markdown(f"**{identity.display_name}**  \n`@{identity.username}`")
        if st.button("Log out", use_container_width=True):
            try:
                session.logout()
                st.rerun()
            except ClientError:
                pass

    @staticmethod
    def render_status_panel(connected: bool, progress: ProgressManager, notifier: Notifier) -> None:
        """Backend connection, per-collection state and recent errors"""
        st.caption("🟢 Backend connected" if connected else "🔴 Backend not connected")

        with st.expander("Data status"):
            st.json(progress.queries.stats())
            errors = notifier.errors()
            if errors:
                st.markdown("**Recent errors**")
                for n in reversed(errors[-5:]):
                    st.caption(f"{n.timestamp:%H:%M:%S} {n.title}: {n.description}")

    @staticmethod
    def render_celebration(progress: ProgressManager) -> None:
        completed = progress.newly_completed
        if completed is None:
            return
        badge = f" and earned the **{completed.badge.name}** badge" if completed.badge else ""
        st.success(f"🏆 You completed **{completed.title}**{badge}!")
        st.balloons()
        if st.button("Dismiss"):
            progress.clear_newly_completed()
            st.rerun()

    @staticmethod
    def render_badges_panel(progress: ProgressManager, signed_in: bool) -> None:
        if progress.queries["badges"].error:
            st.warning(f"Badges unavailable: {progress.queries['badges'].error.message}")
        if not progress.badges:
            st.info("No badges defined yet.")
            return

        for badge in progress.badges:
            user_badge = progress.get_user_badge(badge.id)
            cols = st.columns([3, 2, 1])
            with cols[0]:
                st.markdown(f"{badge.icon or '🏅'} **{badge.name}**  \n{badge.description}")
            with cols[1]:
                st.progress(PanelBuilder.progress_fraction(progress.badge_progress(badge.id)))
            with cols[2]:
                if signed_in and user_badge is not None:
                    shown = st.checkbox("Show", value=user_badge.displayed, key=f"badge_{user_badge.id}")
                    if shown != user_badge.displayed:
                        progress.set_badge_displayed(user_badge.id, shown)
                        st.rerun()

    @staticmethod
    def render_achievements_panel(progress: ProgressManager, signed_in: bool) -> None:
        if progress.queries["achievements"].error:
            st.warning(f"Achievements unavailable: {progress.queries['achievements'].error.message}")
        if not progress.achievements:
            st.info("No achievements defined yet.")
            return

        for achievement in progress.achievements:
            status = progress.achievement_progress(achievement.id)
            icon = "✅" if status.completed else ("🔒" if achievement.is_secret else "🎯")
            st.markdown(f"{icon} **{achievement.name}**  \n{achievement.description}")
            st.progress(PanelBuilder.progress_fraction(status.progress, status.completed))

        if signed_in and progress.user_achievements:
            st.plotly_chart(
                ChartBuilder.create_achievement_chart(progress.user_achievements),
                use_container_width=True,
            )
        if signed_in and st.button("Refresh progress"):
            progress.refresh()
            st.rerun()

    @staticmethod
    def render_api_keys_panel(keys: ApiKeyManager) -> None:
        if keys.generated_key:
            st.warning("Copy this key now. It will not be shown again.")
            st.code(keys.generated_key)
            if st.button("I have copied it"):
                keys.dismiss_generated_key()
                st.rerun()

        with st.form("new_key_form", clear_on_submit=True):
            name = st.text_input("Key name")
            if st.form_submit_button("Generate API key"):
                if keys.generate_key(name):
                    st.rerun()

        if not keys.api_keys:
            st.info("You have no API keys yet.")
        for api_key in keys.api_keys:
            cols = st.columns([2, 3, 2, 1])
            cols[0].markdown(f"**{api_key.name}**")
            cols[1].code(api_key.masked)
            cols[2].caption(
                f"Last used {api_key.last_used:%Y-%m-%d}" if api_key.last_used else "Never used"
            )
            if cols[3].button("Revoke", key=f"revoke_{api_key.id}"):
                keys.revoke_key(api_key.id)
                st.rerun()

        usage = keys.usage_frame()
        st.plotly_chart(ChartBuilder.create_usage_chart(usage), use_container_width=True)
        if not usage.empty:
            st.dataframe(usage, use_container_width=True, hide_index=True)
