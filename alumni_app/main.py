# alumni_app/main.py

import streamlit as st
from dotenv import load_dotenv
from alumni_app.services.api import get_user_info
from alumni_app.ui.login import login_page, logout
from alumni_app.ui.stories import stories_page
from alumni_app.ui.events import events_page
from alumni_app.ui.profile import profile_page, directory_page
from alumni_app.ui.admin import admin_page


load_dotenv()


def main_page():
    user = st.session_state["user"]
    st.sidebar.markdown(f"### 안녕하세요, {user['firstname']}님!")
    st.sidebar.markdown("## 📋 메뉴")

    if st.sidebar.button("🌟 스토리"):
        st.session_state["page"] = "stories"
    if st.sidebar.button("📅 행사"):
        st.session_state["page"] = "events"
    if st.sidebar.button("🤝 동문 찾기"):
        st.session_state["page"] = "directory"
    if st.sidebar.button("👤 내 프로필"):
        st.session_state["page"] = "profile"
    if user.get("usertype") == "admin" and st.sidebar.button("🛠️ 관리자"):
        st.session_state["page"] = "admin"
    if st.sidebar.button("🔓 로그아웃"):
        logout()
        st.session_state.clear()
        st.rerun()

    page = st.session_state.get("page", "stories")
    if page == "events":
        events_page()
    elif page == "directory":
        directory_page()
    elif page == "profile":
        profile_page()
    elif page == "admin" and user.get("usertype") == "admin":
        admin_page()
    else:
        stories_page()


if "access_token" not in st.session_state:
    login_page()
else:
    # A stale cookie token is dropped here rather than failing on every page
    me = get_user_info(st.session_state["access_token"])
    if me.get("error"):
        logout()
        st.session_state.clear()
        st.rerun()
    st.session_state["user"] = me
    main_page()
