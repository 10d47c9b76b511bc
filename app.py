"""
EmoTeach — Emotion-Adaptive Lesson Screen (Streamlit)
=====================================================
  - Camera feed with 1 Hz facial-expression sampling
  - Lesson content that switches between full / simplified / quiz modes
  - Encouragement banner, hints and extra examples driven by the engine
  - Emotion confidence timeline and lesson progress gauge

All adaptation logic lives in emoteach/; this file only renders LessonView.
"""

import asyncio
import os
import sys
import tempfile

import cv2
import pandas as pd
import plotly.graph_objects as go
import streamlit as st
from streamlit.runtime.scriptrunner import get_script_run_ctx

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(__file__))

from config import CAMERA_INDEX, CONFIDENCE_THRESHOLD, SAMPLE_INTERVAL_SECONDS
from emoteach.classifiers import FaceEmotionClassifier, annotate_frame
from emoteach.debug_log import SessionLogRouter
from emoteach.errors import CameraUnavailableError
from emoteach.lesson_session import LessonSession
from emoteach.lessons import LessonCatalog
from emoteach.quiz import OptionMark
from emoteach.sampler import EmotionSampler
from emoteach.video_source import CameraSource

# ──────────────────────────────────────────────
# Page config
# ──────────────────────────────────────────────
st.set_page_config(
    page_title="EmoTeach Demo",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .block-container { padding-top: 0.8rem; }
    .banner-box {
        background-color: #ecfdf5;
        border-left: 4px solid #10b981;
        color: #065f46;
        padding: 12px 18px;
        border-radius: 6px;
        font-weight: 600;
        margin: 8px 0;
    }
    .adapting-badge {
        background-color: #dbeafe;
        color: #2563eb;
        padding: 2px 10px;
        border-radius: 999px;
        font-size: 0.75rem;
    }
    .emotion-card {
        background-color: #16213e;
        border-radius: 10px;
        padding: 12px 16px;
        color: #e0e0e0;
    }
    .debug-log { font-family: monospace; font-size: 0.75rem; color: #888; }
</style>
""", unsafe_allow_html=True)

MARK_SYMBOL = {OptionMark.CORRECT: " ✓", OptionMark.INCORRECT: " ✗", OptionMark.NONE: ""}


# ──────────────────────────────────────────────
# Cached model loading
# ──────────────────────────────────────────────
@st.cache_resource
def load_classifier():
    classifier = FaceEmotionClassifier()
    asyncio.run(classifier.load())
    return classifier


# ──────────────────────────────────────────────
# Debug log
# ──────────────────────────────────────────────
@st.cache_resource
def debug_log_router():
    """One sink per process, routed by the script thread's browser session."""
    def _session_id():
        ctx = get_script_run_ctx(suppress_warning=True)
        return ctx.session_id if ctx is not None else None

    return SessionLogRouter(_session_id).install()


# ──────────────────────────────────────────────
# Session bootstrap
# ──────────────────────────────────────────────
def _init_state():
    ss = st.session_state
    if "catalog" in ss:
        return
    ss.catalog = LessonCatalog()
    ss.sessions = {}
    ss.history = []
    ss.camera = None
    ss.sampler = None
    ss.camera_error = None
    ss.debug_log = debug_log_router().buffer_for(get_script_run_ctx().session_id)


def current_session(lesson_id):
    ss = st.session_state
    if lesson_id not in ss.sessions:
        lesson = ss.catalog.get(lesson_id)
        ss.sessions[lesson_id] = LessonSession(
            lesson, ss.catalog, initial_progress=ss.catalog.progress(lesson_id),
        )
    return ss.sessions[lesson_id]


_init_state()


# ──────────────────────────────────────────────
# Chart helpers
# ──────────────────────────────────────────────
def create_donut_gauge(value, color="#2563eb"):
    fig = go.Figure(go.Pie(
        values=[value, 100 - value],
        hole=0.75,
        marker=dict(colors=[color, "rgba(60,60,80,0.25)"]),
        textinfo="none",
        hoverinfo="none",
        showlegend=False,
        direction="clockwise",
        sort=False,
        rotation=90,
    ))
    fig.add_annotation(
        text=f"<b>{value}%</b>",
        font=dict(size=26),
        showarrow=False, x=0.5, y=0.5,
    )
    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        height=170,
        margin=dict(l=5, r=5, t=5, b=5),
    )
    return fig


def create_timeline_chart(history):
    df = pd.DataFrame(history)
    fig = go.Figure()
    for label, group in df.groupby("label"):
        fig.add_trace(go.Scatter(
            x=group["t"], y=group["confidence"], mode="markers", name=label,
        ))
    fig.add_hline(y=CONFIDENCE_THRESHOLD, line_dash="dash", line_color="orange",
                  annotation_text=f"Confidence gate ({CONFIDENCE_THRESHOLD}%)")
    fig.update_layout(
        xaxis_title="Time (seconds)",
        yaxis_title="Confidence (%)",
        yaxis=dict(range=[0, 100]),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        legend=dict(orientation="h", y=1.15),
        height=260,
        margin=dict(l=40, r=20, t=40, b=40),
    )
    return fig


# ──────────────────────────────────────────────
# Sidebar: lessons + camera
# ──────────────────────────────────────────────
st.sidebar.title("Lessons")
catalog = st.session_state.catalog
lesson_ids = [lesson.id for lesson in catalog]
lesson_id = st.sidebar.radio(
    "Choose a lesson", lesson_ids,
    format_func=lambda i: f"{catalog.get(i).title} ({catalog.progress(i)}%)",
)
st.sidebar.caption(catalog.get(lesson_id).description)
session = current_session(lesson_id)

st.sidebar.markdown("---")
st.sidebar.subheader("Camera")
video_choice = st.sidebar.radio("Video Source", ["Webcam", "Upload Video"])
video_path = CAMERA_INDEX
if video_choice == "Upload Video":
    uploaded = st.sidebar.file_uploader("Choose a video file", type=["mp4", "avi", "mov", "mkv"])
    video_path = None
    if uploaded:
        tfile = tempfile.NamedTemporaryFile(delete=False, suffix=".mp4")
        tfile.write(uploaded.read())
        video_path = tfile.name


def start_camera():
    ss = st.session_state
    ss.camera_error = None
    if video_path is None:
        ss.camera_error = "Please select a video source first."
        return
    classifier = load_classifier()
    camera = CameraSource(video_path)
    sampler = EmotionSampler(
        camera, classifier,
        on_sample=lambda sample, now: _on_sample(sample, now),
        on_clear=lambda: current_session(ss.active_lesson).clear_emotion(),
    )
    try:
        camera.start()
    except CameraUnavailableError as exc:
        ss.camera_error = str(exc)
        return
    ss.camera, ss.sampler = camera, sampler
    ss.history = []


def stop_camera():
    ss = st.session_state
    if ss.camera is not None:
        ss.camera.stop()
    ss.camera, ss.sampler = None, None


def _on_sample(sample, now):
    ss = st.session_state
    current_session(ss.active_lesson).handle_sample(sample, now)
    if sample.label is not None:
        if not ss.history:
            ss.t0 = now
        ss.history.append({"t": round(now - ss.t0, 1), "label": sample.label,
                           "confidence": sample.confidence})


st.session_state.active_lesson = lesson_id
camera_active = st.session_state.camera is not None and st.session_state.camera.is_active
if not camera_active:
    st.sidebar.button("Start Webcam", type="primary", on_click=start_camera)
else:
    st.sidebar.button("Stop Webcam", on_click=stop_camera)
if st.session_state.camera_error:
    st.sidebar.error(st.session_state.camera_error)


# ──────────────────────────────────────────────
# Header
# ──────────────────────────────────────────────
st.title("EmoTeach Demo")
st.caption("AI-Powered Adaptive Learning Platform")


# ──────────────────────────────────────────────
# Live lesson screen (re-runs every sampling tick while the camera is on)
# ──────────────────────────────────────────────
def render_quiz(view):
    quiz = view.quiz
    head, count = st.columns([4, 1])
    head.subheader("Practice Quiz")
    if view.adapting:
        head.markdown('<span class="adapting-badge">• Adapted for you</span>', unsafe_allow_html=True)
    count.markdown(f"**{quiz.position} of {quiz.total}**")

    st.markdown(f"#### {quiz.prompt}")
    for i, (option, mark) in enumerate(zip(quiz.options, quiz.marks)):
        if st.button(option + MARK_SYMBOL[mark], key=f"opt_{quiz.position}_{i}",
                     disabled=quiz.answer_revealed, use_container_width=True):
            session.submit_answer(i)
            st.rerun(scope="fragment")

    if quiz.answer_revealed:
        st.success(quiz.explanation)
        if st.button(quiz.action_label, type="primary"):
            session.advance_quiz()
            st.rerun(scope="fragment")

    left, right = st.columns(2)
    left.caption(quiz.score_text)
    if right.button("Exit Quiz"):
        session.exit_quiz()
        st.rerun(scope="fragment")


def render_lesson(view):
    st.subheader(view.title)
    st.progress(view.progress / 100, text=f"Progress: {view.progress}%")

    if view.content_block == "simplified":
        st.warning("**Simplified Explanation**\n\n" + view.content)
    else:
        st.info(view.content)

    if view.show_extra_examples:
        st.markdown("**More Examples to Help**")
        for example in view.extra_examples:
            st.markdown(f"- {example}")

    if view.show_hints:
        st.markdown("**Helpful Hints**")
        for hint in view.hints:
            st.markdown(f"- {hint}")

    b1, b2, b3 = st.columns(3)
    if b1.button("Take Quiz", type="primary"):
        session.start_quiz()
        st.rerun(scope="fragment")
    if b2.button("Mark Complete"):
        session.mark_complete()
        st.rerun(scope="fragment")
    if b3.button("Simplify"):
        session.request_simplified()
        st.rerun(scope="fragment")


def lesson_screen():
    ss = st.session_state
    if ss.sampler is not None:
        asyncio.run(ss.sampler.tick())

    view = session.view()
    col_cam, col_main = st.columns([2, 3])

    with col_cam:
        st.markdown(
            f'<div class="emotion-card">{view.emotion_emoji} <b>{view.emotion_label}</b>'
            f' &nbsp; {view.emotion_detail}'
            + (' &nbsp; <span class="adapting-badge">Adapting</span>' if view.adapting else "")
            + '</div>',
            unsafe_allow_html=True,
        )
        camera = ss.camera
        if camera is not None and camera.last_frame is not None:
            frame = annotate_frame(camera.last_frame, ss.sampler.latest if ss.sampler else None)
            st.image(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB), caption="LIVE", use_container_width=True)
        else:
            st.caption("Click Start Webcam to begin emotion detection")

        st.plotly_chart(create_donut_gauge(view.progress), use_container_width=True)
        if len(ss.history) >= 2:
            st.plotly_chart(create_timeline_chart(ss.history), use_container_width=True)

        st.markdown("**Debug Log**")
        st.markdown(
            '<div class="debug-log">' + "<br>".join(ss.debug_log) + "</div>",
            unsafe_allow_html=True,
        )

    with col_main:
        st.markdown(f'<div class="banner-box">💡 {view.banner}</div>', unsafe_allow_html=True)
        if view.reason:
            st.caption(view.reason)
        if view.quiz is not None:
            render_quiz(view)
        else:
            render_lesson(view)


st.fragment(run_every=SAMPLE_INTERVAL_SECONDS if camera_active else None)(lesson_screen)()
