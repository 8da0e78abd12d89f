from typing import Any, Iterable, Mapping, Tuple
from datetime import datetime
from urllib.parse import urlparse

import streamlit as st


def _format_pub_date(value: Any) -> str:
    if not isinstance(value, str) or not value:
        return ""
    try:
        # NewsData.io sends "YYYY-MM-DD HH:MM:SS".
        return datetime.fromisoformat(value.replace("Z", "")).strftime("%b %d, %Y")
    except ValueError:
        return value


def render_article_card(article: Mapping[str, Any]) -> None:
    title = article.get("title") or "Untitled"
    link = article.get("link") or ""
    source = article.get("source") or ""
    domain = urlparse(link).netloc if link else ""

    favicon_url = ""
    if domain:
        favicon_url = f"https://www.google.com/s2/favicons?sz=64&domain={domain}"

    image = article.get("image")
    if image:
        st.image(image, use_container_width=True)

    card_html = f"""
    <div class="nl-article-card">
        <div class="nl-article-header">
            {('<img src="' + favicon_url + '" class="nl-article-favicon"/>') if favicon_url else ''}
            <div class="nl-article-header-text">
                <div class="nl-article-source">{source} · {article.get("topic") or ""}</div>
                <div class="nl-article-title">{title}</div>
            </div>
        </div>
        <div class="nl-article-summary">{article.get("summary") or ""}</div>
        <div class="nl-article-footer">
            <span>{_format_pub_date(article.get("pubDate"))}</span>
            {('<a href="' + link + '" target="_blank" class="nl-article-link">Open article</a>') if link else ''}
        </div>
    </div>
    """
    st.markdown(card_html, unsafe_allow_html=True)


def render_vocabulary(vocabulary: Iterable[Mapping[str, Any]]) -> None:
    st.subheader("Vocabulary")
    rows = list(vocabulary)
    if not rows:
        st.write("No vocabulary in this lesson.")
        return
    for item in rows:
        st.markdown(
            f"**{item.get('word', '')}** *({item.get('pos', '')})* [{item.get('pronunciation', '')}]  \n"
            f"{item.get('meaning', '')}  \n"
            f"> {item.get('example', '')}"
        )


def render_grammar(grammar: Iterable[Mapping[str, Any]]) -> None:
    st.subheader("Grammar")
    for point in grammar:
        with st.expander(point.get("pattern") or "Grammar point"):
            st.markdown(f"> {point.get('sentence', '')}")
            st.write(point.get("explanation", ""))
            st.caption(point.get("breakdown", ""))


def grade_answer(question: Mapping[str, Any], position: int) -> Tuple[bool, str]:
    """Grade the option at ``position`` and return the correct option's label."""
    options = list(question.get("options") or [])
    answer = question.get("answer", 0)
    label = options[answer] if isinstance(answer, int) and 0 <= answer < len(options) else ""
    return position == answer, label


def render_quiz(quiz: Iterable[Mapping[str, Any]], key_prefix: str) -> None:
    st.subheader("Quiz")
    for idx, question in enumerate(quiz):
        options = list(question.get("options") or [])
        if not options:
            continue
        choice = st.radio(
            f"Q{idx + 1}. {question.get('question', '')}",
            range(len(options)),
            format_func=lambda position, labels=options: labels[position],
            index=None,
            key=f"{key_prefix}-quiz-{idx}",
        )
        if choice is None:
            continue
        correct, answer_label = grade_answer(question, choice)
        if correct:
            st.success("Correct!")
        else:
            st.error(f"Answer: {answer_label}")
        st.caption(question.get("explanation", ""))


def render_lesson(lesson: Mapping[str, Any], key_prefix: str = "lesson") -> None:
    st.markdown(f"### {lesson.get('headline', '')}")
    st.write(lesson.get("body", ""))
    with st.expander("日本語訳"):
        st.write(lesson.get("translation", ""))
    render_vocabulary(lesson.get("vocabulary") or [])
    render_grammar(lesson.get("grammar") or [])
    render_quiz(lesson.get("quiz") or [], key_prefix)
