# alumni_app/ui/admin.py

import streamlit as st
from alumni_app.services.api import (
    list_users,
    update_user_status,
    list_stories,
    delete_story,
    list_events,
    delete_event,
)

STATUSES = ["active", "inactive", "pending"]


def admin_page():
    token = st.session_state["access_token"]
    st.title("🛠️ 관리자 대시보드")

    tab_users, tab_stories, tab_events = st.tabs(["회원", "스토리", "행사"])
    with tab_users:
        manage_users(token)
    with tab_stories:
        manage_stories(token)
    with tab_events:
        manage_events(token)


def manage_users(token):
    users = list_users(token)
    if isinstance(users, dict) and users.get("error"):
        st.error(users["error"])
        return

    st.caption(f"총 {len(users)}명")
    for user in users:
        col1, col2 = st.columns([5, 2])
        with col1:
            st.markdown(f"**{user['firstname']} {user['lastname']}** (@{user['username']}) · {user['usertype']}")
        with col2:
            status = st.selectbox(
                "상태",
                options=STATUSES,
                index=STATUSES.index(user["status"]),
                key=f"status-{user['id']}",
                label_visibility="collapsed",
            )
            if status != user["status"]:
                result = update_user_status(token, user["id"], status)
                if result.get("error"):
                    st.error(result["error"])
                else:
                    st.rerun()


def manage_stories(token):
    result = list_stories(1, 100)
    if result.get("error"):
        st.error(result["error"])
        return

    for story in result["stories"]:
        col1, _, col3 = st.columns([6, 0.6, 0.6])
        with col1:
            author = story["author"]
            st.markdown(f"**{story['title']}** · {author['username']} · ❤️ {story['likes']}")
        with col3:
            if st.button("🗑️", key=f"admin-story-{story['id']}"):
                outcome = delete_story(token, story["id"])
                if outcome.get("error"):
                    st.error(outcome["error"])
                else:
                    st.rerun()


def manage_events(token):
    result = list_events(1, 100)
    if result.get("error"):
        st.error(result["error"])
        return

    for event in result["events"]:
        col1, _, col3 = st.columns([6, 0.6, 0.6])
        with col1:
            st.markdown(
                f"**{event['title']}** · {event['calendar']['date'][:10]} · 👥 {event['attendeeCount']}"
            )
        with col3:
            if st.button("🗑️", key=f"admin-event-{event['id']}"):
                outcome = delete_event(token, event["id"])
                if outcome.get("error"):
                    st.error(outcome["error"])
                else:
                    st.rerun()
