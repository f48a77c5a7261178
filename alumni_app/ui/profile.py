# alumni_app/ui/profile.py

import streamlit as st
from alumni_app.services.api import (
    get_user,
    update_profile,
    change_password,
    user_stories,
    user_events,
    delete_story,
    alumni_directory,
    toggle_friend,
)
from alumni_app.ui.stories import render_pager


def profile_page():
    token = st.session_state["access_token"]
    me = st.session_state["user"]

    profile = get_user(token, me["id"])
    if profile.get("error"):
        st.error(profile["error"])
        return

    col1, col2 = st.columns([1, 3])
    with col1:
        if profile.get("profileImage"):
            st.image(profile["profileImage"], width=120)
    with col2:
        st.title(f"{profile['firstname']} {profile['lastname']}")
        st.caption(f"@{profile['username']} · {profile['email']}")
        st.markdown(
            f"📝 스토리 {profile['storyCount']} · 📅 행사 {profile['eventCount']} · 🤝 친구 {profile['friendCount']}"
        )

    tab_stories, tab_events, tab_settings = st.tabs(["내 스토리", "참석 행사", "설정"])
    with tab_stories:
        show_my_stories(token, me["id"])
    with tab_events:
        show_my_events(token, me["id"])
    with tab_settings:
        show_settings(token, profile)


def show_my_stories(token, user_id):
    stories = user_stories(token, user_id)
    if isinstance(stories, dict) and stories.get("error"):
        st.error(stories["error"])
        return
    if not stories:
        st.info("작성한 스토리가 없습니다.")
        return

    for story in stories:
        col1, col2 = st.columns([6, 1])
        with col1:
            st.markdown(f"**{story['title']}** · ❤️ {story['likes']} · 💬 {story['comments']}")
        with col2:
            if st.button("🗑️", key=f"delete-story-{story['id']}"):
                result = delete_story(token, story["id"])
                if result.get("error"):
                    st.error(result["error"])
                else:
                    st.rerun()


def show_my_events(token, user_id):
    events = user_events(token, user_id)
    if isinstance(events, dict) and events.get("error"):
        st.error(events["error"])
        return
    if not events:
        st.info("참석 신청한 행사가 없습니다.")
        return

    for event in events:
        status = "종료" if event["isPast"] else "예정"
        st.markdown(f"- **{event['title']}** · {event['calendar']['date'][:10]} · {status}")


def show_settings(token, profile):
    with st.form("profile_form"):
        firstname = st.text_input("이름", value=profile["firstname"])
        lastname = st.text_input("성", value=profile["lastname"])
        email = st.text_input("이메일", value=profile["email"])
        image = st.file_uploader("프로필 이미지", type=["png", "jpg", "jpeg", "gif"])
        if st.form_submit_button("💾 저장"):
            result = update_profile(token, firstname, lastname, email, image)
            if result.get("error"):
                st.error(result["error"])
            else:
                st.session_state["user"] = result
                st.success("✅ 프로필이 수정되었습니다.")
                st.rerun()

    with st.form("password_form", clear_on_submit=True):
        current = st.text_input("현재 비밀번호", type="password")
        new = st.text_input("새 비밀번호", type="password")
        confirm = st.text_input("새 비밀번호 확인", type="password")
        if st.form_submit_button("🔑 비밀번호 변경"):
            if new != confirm:
                st.error("새 비밀번호가 일치하지 않습니다.")
            else:
                result = change_password(token, current, new)
                if result.get("error"):
                    st.error(result["error"])
                else:
                    st.success("✅ 비밀번호가 변경되었습니다.")


def directory_page():
    token = st.session_state["access_token"]
    me = st.session_state["user"]
    st.title("🤝 동문 찾기")

    search = st.text_input("이름, 아이디, 이메일 검색", key="directory_search")
    if search != st.session_state.get("directory_last_search"):
        st.session_state["directory_page"] = 1
        st.session_state["directory_last_search"] = search

    page = st.session_state.get("directory_page", 1)
    result = alumni_directory(token, page, 10, search)
    if result.get("error"):
        st.error(result["error"])
        return
    if not result["alumni"]:
        st.info("검색 결과가 없습니다.")
        return

    for alumni in result["alumni"]:
        col1, col2 = st.columns([6, 1])
        with col1:
            st.markdown(f"**{alumni['firstname']} {alumni['lastname']}** (@{alumni['username']})")
        with col2:
            if alumni["id"] != me["id"] and st.button("🤝", key=f"friend-{alumni['id']}"):
                outcome = toggle_friend(token, alumni["id"])
                if outcome.get("error"):
                    st.error(outcome["error"])
                else:
                    st.success(outcome["message"])

    render_pager("directory_page", result)
