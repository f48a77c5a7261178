# alumni_app/ui/login.py

import os
import json
import streamlit as st
from dotenv import load_dotenv
from streamlit_cookies_manager import EncryptedCookieManager
from alumni_app.services.api import login_user, signup_user

load_dotenv()

COOKIE_PASSWORD = os.getenv("COOKIE_PASSWORD", "alumni-network")

cookies = EncryptedCookieManager(prefix="alumni/", password=COOKIE_PASSWORD)
if not cookies.ready():
    st.stop()


def remember_session(result):
    st.session_state["access_token"] = result["token"]
    st.session_state["user"] = result["user"]
    cookies["access_token"] = result["token"]
    cookies["user"] = json.dumps(result["user"])
    cookies.save()


def logout():
    for key in ("access_token", "user"):
        if key in cookies:
            del cookies[key]
    cookies.save()


def login_page():
    st.title("🎓 동문 네트워크")

    if "access_token" not in st.session_state:
        if cookies.get("access_token") and cookies.get("user"):
            st.session_state["access_token"] = cookies["access_token"]
            st.session_state["user"] = json.loads(cookies["user"])
            st.rerun()

    if "show_register" not in st.session_state:
        st.session_state["show_register"] = False

    if st.session_state["show_register"]:
        show_register_form()
    else:
        show_login_form()


def show_login_form():
    with st.form("login_form"):
        email = st.text_input("이메일")
        password = st.text_input("비밀번호", type="password")
        submitted = st.form_submit_button("로그인")

    if submitted:
        with st.spinner("로그인 중..."):
            result = login_user(email, password)
            if result.get("error"):
                st.error(f"❌ 로그인 실패: {result['error']}")
            else:
                remember_session(result)
                st.success("✅ 로그인 성공!")
                st.rerun()

    if st.button("회원가입"):
        st.session_state["show_register"] = True
        st.rerun()


def show_register_form():
    st.subheader("📝 회원가입")

    with st.form("register_form"):
        username = st.text_input("아이디")
        email = st.text_input("이메일")
        col1, col2 = st.columns(2)
        with col1:
            firstname = st.text_input("이름")
        with col2:
            lastname = st.text_input("성")
        password = st.text_input("비밀번호", type="password")
        submitted = st.form_submit_button("가입하기")

    if submitted:
        with st.spinner("회원가입 처리 중..."):
            result = signup_user(username, email, firstname, lastname, password)
            if result.get("error"):
                st.error(f"❌ 실패: {result['error']}")
            else:
                remember_session(result)
                st.session_state["show_register"] = False
                st.success("🎉 회원가입 성공!")
                st.rerun()

    if st.button("← 로그인으로 돌아가기"):
        st.session_state["show_register"] = False
        st.rerun()
