"""
Chirp - Streamlit front end for the emoji feed.

Run with: streamlit run UI/feed.py
Talks to the API over HTTP (API_BASE_URL, default http://localhost:8000).
"""
import os
from datetime import datetime, timezone

import requests
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

# Configuration
API_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
FEED_URL = f"{API_URL}/api/trpc/posts.getAll"
CREATE_URL = f"{API_URL}/api/trpc/posts.create"

st.set_page_config(page_title="Chirp", page_icon="🐦", layout="centered")

# Initialize session state
if "id_token" not in st.session_state:
    st.session_state["id_token"] = ""
if "composer" not in st.session_state:
    st.session_state["composer"] = ""


def _auth_headers():
    token = st.session_state.get("id_token")
    return {"Authorization": f"Bearer {token}"} if token else {}


def _error_message(response):
    try:
        error = response.json().get("error", {})
    except ValueError:
        return f"Request failed ({response.status_code})"
    field_errors = error.get("fieldErrors") or {}
    if field_errors.get("content"):
        return field_errors["content"][0]
    if error.get("code") == "TOO_MANY_REQUESTS":
        return "Too many posts, wait a moment and try again."
    return error.get("message", f"Request failed ({response.status_code})")


def from_now(created_at: str) -> str:
    """Relative time such as 'a few seconds ago' or '3 hours ago'."""
    then = datetime.fromisoformat(created_at)
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    seconds = int((datetime.now(timezone.utc) - then).total_seconds())
    if seconds < 45:
        return "a few seconds ago"
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = round(seconds / size)
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "a minute ago"


def fetch_feed():
    response = requests.get(FEED_URL, headers=_auth_headers(), timeout=5)
    if response.status_code != 200:
        raise RuntimeError(_error_message(response))
    return response.json()["result"]["data"]


def submit_post():
    content = st.session_state["composer"]
    try:
        response = requests.post(
            CREATE_URL,
            json={"content": content},
            headers=_auth_headers(),
            timeout=5,
            allow_redirects=False,
        )
    except requests.exceptions.ConnectionError:
        st.toast("Cannot connect to API. Make sure the API server is running (uvicorn api.main:app --reload)")
        return
    if response.status_code == 200:
        st.session_state["composer"] = ""
    elif response.status_code == 307:
        st.toast("Your session has expired, please sign in again.")
        st.session_state["id_token"] = ""
    else:
        st.toast(_error_message(response))


# ========== SIDEBAR: SIGN IN ==========

with st.sidebar:
    st.header("Account")
    if st.session_state["id_token"]:
        st.success("Signed in")
        if st.button("Sign out"):
            st.session_state["id_token"] = ""
            st.rerun()
    else:
        token = st.text_input("Firebase ID token", type="password")
        if st.button("Sign in", disabled=not token):
            st.session_state["id_token"] = token.strip()
            st.rerun()

signed_in = bool(st.session_state["id_token"])

# ========== COMPOSER ==========

st.title("Chirp")

if signed_in:
    with st.container(border=True):
        # on_change handlers run before the rerun, so clearing the key here is allowed
        st.text_input(
            "New post",
            key="composer",
            placeholder="Type some emojis!",
            label_visibility="collapsed",
            on_change=submit_post,
        )
else:
    st.info("Sign in to post.")

# ========== FEED ==========

try:
    with st.spinner("Loading feed..."):
        feed = fetch_feed()
except Exception as e:
    st.error(f"Something went wrong: {e}")
    feed = None

if feed is not None:
    if not feed:
        st.caption("No posts yet.")
    for entry in feed:
        post, author = entry["post"], entry["author"]
        with st.container(border=True):
            avatar_col, body_col = st.columns([1, 8])
            with avatar_col:
                st.image(author["profileImageUrl"], width=56)
            with body_col:
                st.caption(f"@{author['username']} · {from_now(post['createdAt'])}")
                st.markdown(f"### {post['content']}")
