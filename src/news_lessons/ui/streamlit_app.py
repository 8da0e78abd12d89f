import os

import httpx
import streamlit as st

try:
    from src.news_lessons.ui.components import render_article_card, render_lesson
except ModuleNotFoundError:
    from components import render_article_card, render_lesson


API_BASE_URL = os.getenv("NEWS_LESSONS_API_BASE_URL", "http://localhost:8000")

CATEGORIES = ["world", "business", "tech", "sports"]
LEVELS = ["beginner", "intermediate", "advanced"]


def _error_message(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            return exc.response.json().get("error") or str(exc)
        except ValueError:
            return str(exc)
    return str(exc)


def fetch_articles(category: str) -> list:
    response = httpx.get(f"{API_BASE_URL}/news", params={"category": category}, timeout=30.0)
    response.raise_for_status()
    return response.json()


def create_lesson(article: dict, level: str) -> dict:
    response = httpx.post(
        f"{API_BASE_URL}/lesson",
        json={"article": article, "level": level},
        timeout=120.0,
    )
    response.raise_for_status()
    return response.json()


def main() -> None:
    st.set_page_config(
        page_title="News Lessons",
        page_icon="📰",
        layout="wide",
    )

    st.markdown(
        """
        <style>
        .nl-article-card {
            background: rgba(15, 15, 25, 0.96);
            border-radius: 0.9rem;
            padding: 0.75rem 0.9rem;
            margin-bottom: 0.5rem;
            border: 1px solid rgba(250, 250, 255, 0.06);
        }
        .nl-article-header {
            display: flex;
            gap: 0.75rem;
            align-items: center;
            margin-bottom: 0.4rem;
        }
        .nl-article-favicon {
            width: 24px;
            height: 24px;
            border-radius: 6px;
        }
        .nl-article-source {
            font-size: 0.7rem;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            opacity: 0.7;
        }
        .nl-article-title {
            font-size: 0.95rem;
            font-weight: 600;
        }
        .nl-article-summary {
            font-size: 0.85rem;
            opacity: 0.9;
        }
        .nl-article-footer {
            display: flex;
            justify-content: space-between;
            font-size: 0.75rem;
            opacity: 0.85;
            margin-top: 0.35rem;
        }
        .nl-article-link {
            color: #4C8DF5;
            text-decoration: none;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )

    if "lessons" not in st.session_state:
        st.session_state["lessons"] = {}

    with st.sidebar:
        st.markdown("### Settings")
        category = st.selectbox("Category", CATEGORIES, index=0)
        level = st.selectbox("Level", LEVELS, index=1)
        if st.button("Clear lessons"):
            st.session_state["lessons"] = {}
            st.rerun()

    st.title("News Lessons")
    st.caption("Today's headlines, turned into English lessons.")

    try:
        with st.spinner("Fetching today's news..."):
            articles = fetch_articles(category)
    except httpx.HTTPError as exc:
        st.error(f"Could not load news: {_error_message(exc)}")
        return

    if not articles:
        st.info("No articles available for this category right now.")
        return

    for idx, article in enumerate(articles):
        render_article_card(article)
        lesson_key = f"{article.get('title')}|{level}"
        if st.button("Create lesson", key=f"lesson-{category}-{idx}"):
            try:
                with st.spinner("Writing your lesson..."):
                    st.session_state["lessons"][lesson_key] = create_lesson(article, level)
            except httpx.HTTPError as exc:
                st.error(f"Could not create lesson: {_error_message(exc)}")

        lesson = st.session_state["lessons"].get(lesson_key)
        if lesson:
            render_lesson(lesson, key_prefix=f"{category}-{idx}")
        st.divider()


if __name__ == "__main__":
    main()
