# alumni_app/ui/stories.py

import streamlit as st
from alumni_app.services.api import (
    list_stories,
    featured_stories,
    get_story,
    create_story,
    like_story,
    add_comment,
)

PAGE_SIZE = 6


def stories_page():
    token = st.session_state["access_token"]
    st.title("🌟 동문 성공 스토리")

    if st.button("✍️ 스토리 작성"):
        st.session_state["show_story_form"] = not st.session_state.get("show_story_form", False)
    if st.session_state.get("show_story_form"):
        handle_story_create(token)

    featured = featured_stories()
    if isinstance(featured, dict) and featured.get("error"):
        st.error(featured["error"])
    elif featured:
        st.subheader("🏆 추천 스토리")
        cols = st.columns(len(featured))
        for col, story in zip(cols, featured):
            with col:
                if story["mediaUrls"]:
                    st.image(story["mediaUrls"][0])
                st.markdown(f"**{story['title']}**")
                st.caption(f"❤️ {story['likes']} · 💬 {story['comments']}")

    st.divider()

    page = st.session_state.get("stories_page", 1)
    result = list_stories(page, PAGE_SIZE)
    if result.get("error"):
        st.error(result["error"])
        return
    if not result["stories"]:
        st.info("등록된 스토리가 없습니다.")
        return

    for story in result["stories"]:
        render_story(token, story)

    render_pager("stories_page", result)


def render_story(token, story):
    author = story["author"]
    with st.container(border=True):
        st.markdown(f"### {story['title']}")
        st.caption(f"{author['firstname']} {author['lastname']} (@{author['username']})")
        for url in story["mediaUrls"]:
            st.image(url, width=320)
        st.write(story["description"])

        col1, col2 = st.columns([1, 5])
        with col1:
            if st.button(f"❤️ {story['likes']}", key=f"like-{story['id']}"):
                result = like_story(token, story["id"])
                if result.get("error"):
                    st.error(result["error"])
                else:
                    st.rerun()
        with col2:
            with st.expander(f"💬 댓글 {story['comments']}개"):
                render_comments(token, story["id"])


def render_comments(token, story_id):
    detail = get_story(story_id, token)
    if detail.get("error"):
        st.error(detail["error"])
        return

    for comment in detail["comments"]:
        author = comment["author"]
        st.markdown(f"**{author['firstname']} {author['lastname']}**: {comment['content']}")

    with st.form(f"comment-form-{story_id}", clear_on_submit=True):
        content = st.text_input("댓글 입력")
        if st.form_submit_button("등록") and content.strip():
            result = add_comment(token, story_id, content)
            if result.get("error"):
                st.error(result["error"])
            else:
                st.rerun()


def handle_story_create(token):
    with st.form("story_form", clear_on_submit=True):
        title = st.text_input("제목")
        description = st.text_area("내용")
        files = st.file_uploader("이미지", type=["png", "jpg", "jpeg", "gif"], accept_multiple_files=True)
        submitted = st.form_submit_button("💾 게시")

    if submitted:
        if not title.strip() or not description.strip():
            st.error("제목과 내용을 입력해주세요.")
            return
        result = create_story(token, title, description, files or [])
        if result.get("error"):
            st.error(result["error"])
        else:
            st.success("✅ 스토리가 등록되었습니다.")
            st.session_state["show_story_form"] = False
            st.rerun()


def render_pager(state_key, result):
    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        if result["page"] > 1 and st.button("← 이전", key=f"{state_key}-prev"):
            st.session_state[state_key] = result["page"] - 1
            st.rerun()
    with col2:
        st.caption(f"{result['page']} / {max(result['pages'], 1)} 페이지 · 총 {result['total']}개")
    with col3:
        if result["hasMore"] and st.button("다음 →", key=f"{state_key}-next"):
            st.session_state[state_key] = result["page"] + 1
            st.rerun()
