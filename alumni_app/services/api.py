# alumni_app/services/api.py

import os
import base64
import requests
from dotenv import load_dotenv

load_dotenv()

# Base URL of the FastAPI backend
FASTAPI_URL = os.getenv("FASTAPI_URL", "http://localhost:8000")
API_URL = f"{FASTAPI_URL}/api"


def _request(method, path, token=None, **kwargs):
    """
    Sends a request to the API and returns the decoded JSON body.
    Failures come back as {"error": message} instead of raising.
    """
    headers = kwargs.pop("headers", {})
    if token:
        headers["Authorization"] = f"Bearer {token}"
    try:
        res = requests.request(method, f"{API_URL}{path}", headers=headers, timeout=30, **kwargs)
    except requests.RequestException as e:
        return {"error": f"서버에 연결할 수 없습니다: {e}"}

    try:
        data = res.json()
    except ValueError:
        data = {}
    if not res.ok:
        message = data.get("message") if isinstance(data, dict) else None
        return {"error": message or f"오류 발생: {res.status_code}"}
    return data


def encode_upload(file_obj):
    """
    Converts a Streamlit UploadedFile into the data-URI payload the API accepts.
    """
    payload = base64.b64encode(file_obj.getvalue()).decode("ascii")
    return {"type": file_obj.type, "data": f"data:{file_obj.type};base64,{payload}"}


# -------------------------------
# Authentication-related functions
# -------------------------------

def login_user(email, password):
    return _request("POST", "/auth/login", json={"email": email, "password": password})


def signup_user(username, email, firstname, lastname, password):
    payload = {
        "username": username,
        "email": email,
        "firstname": firstname,
        "lastname": lastname,
        "password": password,
    }
    return _request("POST", "/auth/signup", json=payload)


def get_user_info(token):
    return _request("GET", "/auth/me", token)


# -------------------------
# Stories
# -------------------------

def list_stories(page=1, limit=10):
    return _request("GET", "/stories", params={"page": page, "limit": limit})


def featured_stories():
    return _request("GET", "/stories/featured")


def get_story(story_id, token=None):
    return _request("GET", f"/stories/{story_id}", token)


def create_story(token, title, description, files=()):
    payload = {
        "title": title,
        "description": description,
        "mediaFiles": [encode_upload(f) for f in files],
    }
    return _request("POST", "/stories", token, json=payload)


def delete_story(token, story_id):
    return _request("DELETE", f"/stories/{story_id}", token)


def like_story(token, story_id):
    return _request("POST", f"/stories/{story_id}/like", token)


def add_comment(token, story_id, content):
    return _request("POST", f"/stories/{story_id}/comments", token, json={"content": content})


# -------------------------
# Events
# -------------------------

def list_events(page=1, limit=10):
    return _request("GET", "/events", params={"page": page, "limit": limit})


def upcoming_events():
    return _request("GET", "/events/upcoming")


def get_event(event_id, token=None):
    return _request("GET", f"/events/{event_id}", token)


def create_event(token, title, description, date, location, files=()):
    payload = {
        "title": title,
        "description": description,
        "date": date.isoformat(),
        "location": location,
        "mediaFiles": [encode_upload(f) for f in files],
    }
    return _request("POST", "/events", token, json=payload)


def delete_event(token, event_id):
    return _request("DELETE", f"/events/{event_id}", token)


def register_for_event(token, event_id):
    return _request("POST", f"/events/{event_id}/register", token)


# -------------------------
# Users
# -------------------------

def get_user(token, user_id):
    return _request("GET", f"/users/{user_id}", token)


def list_users(token):
    return _request("GET", "/users", token)


def alumni_directory(token, page=1, limit=10, search=""):
    return _request("GET", "/users/alumni", token, params={"page": page, "limit": limit, "search": search})


def update_profile(token, firstname=None, lastname=None, email=None, profile_image=None):
    payload = {"firstname": firstname, "lastname": lastname, "email": email}
    if profile_image is not None:
        payload["profileImage"] = encode_upload(profile_image)["data"]
    return _request("PUT", "/users/profile", token, json=payload)


def change_password(token, current_password, new_password):
    payload = {"currentPassword": current_password, "newPassword": new_password}
    return _request("PUT", "/users/password", token, json=payload)


def toggle_friend(token, user_id):
    return _request("POST", f"/users/{user_id}/friend", token)


def update_user_status(token, user_id, status):
    return _request("PUT", f"/users/{user_id}/status", token, json={"status": status})


def user_stories(token, user_id):
    return _request("GET", f"/users/{user_id}/stories", token)


def user_events(token, user_id):
    return _request("GET", f"/users/{user_id}/events", token)
