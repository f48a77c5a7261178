# alumni_app/ui/events.py

from datetime import datetime, time as dtime
import streamlit as st
from alumni_app.services.api import (
    list_events,
    upcoming_events,
    get_event,
    create_event,
    register_for_event,
)
from alumni_app.ui.stories import render_pager

PAGE_SIZE = 6


def events_page():
    token = st.session_state["access_token"]
    user = st.session_state["user"]
    st.title("📅 동문 행사")

    if user.get("usertype") == "admin":
        if st.button("➕ 행사 등록"):
            st.session_state["show_event_form"] = not st.session_state.get("show_event_form", False)
        if st.session_state.get("show_event_form"):
            handle_event_create(token)

    upcoming = upcoming_events()
    if isinstance(upcoming, dict) and upcoming.get("error"):
        st.error(upcoming["error"])
    elif upcoming:
        st.subheader("⏰ 다가오는 행사")
        for event in upcoming:
            st.markdown(f"- **{event['title']}** · {event['calendar']['date'][:10]} · {event['calendar']['location']}")

    st.divider()

    page = st.session_state.get("events_page", 1)
    result = list_events(page, PAGE_SIZE)
    if result.get("error"):
        st.error(result["error"])
        return
    if not result["events"]:
        st.info("등록된 행사가 없습니다.")
        return

    for event in result["events"]:
        render_event(token, event)

    render_pager("events_page", result)


def render_event(token, event):
    with st.container(border=True):
        st.markdown(f"### {event['title']}")
        st.caption(f"📍 {event['calendar']['location']} · 🗓️ {event['calendar']['date'][:16].replace('T', ' ')}")
        for url in event["mediaUrls"]:
            st.image(url, width=320)
        st.write(event["description"])
        st.caption(f"👥 참석자 {event['attendeeCount']}명")

        if event["isPast"]:
            st.caption("종료된 행사입니다.")
            return

        detail = get_event(event["id"], token)
        registered = detail.get("registered", False) if not detail.get("error") else False
        label = "참석 취소" if registered else "참석 신청"
        if st.button(label, key=f"register-{event['id']}"):
            result = register_for_event(token, event["id"])
            if result.get("error"):
                st.error(result["error"])
            else:
                st.success(result["message"])
                st.rerun()


def handle_event_create(token):
    with st.form("event_form", clear_on_submit=True):
        title = st.text_input("행사명")
        description = st.text_area("설명")
        col1, col2 = st.columns(2)
        with col1:
            day = st.date_input("날짜")
        with col2:
            at = st.time_input("시간", value=dtime(18, 0))
        location = st.text_input("장소")
        files = st.file_uploader("이미지", type=["png", "jpg", "jpeg", "gif"], accept_multiple_files=True)
        submitted = st.form_submit_button("💾 등록")

    if submitted:
        if not title.strip() or not description.strip() or not location.strip():
            st.error("모든 항목을 입력해주세요.")
            return
        result = create_event(token, title, description, datetime.combine(day, at), location, files or [])
        if result.get("error"):
            st.error(result["error"])
        else:
            st.success("✅ 행사가 등록되었습니다.")
            st.session_state["show_event_form"] = False
            st.rerun()
