"""
Kinetics Coach - Biomechanics Dashboard

Upload a clip, pick the sport, and review the generated report, drills and
weekly plan. Reports are stored locally per user.
"""

from pathlib import Path

import pandas as pd
import streamlit as st

from kinetics.config import get_storage_dir, load_config
from kinetics.errors import DuplicateIdentity, InputTooLarge, MediaUnreadable
from kinetics.models import Activity, AnalysisReport, StatusTier
from kinetics.pipeline import analyze_video_sync, check_upload_size
from kinetics.storage import ReportStore
from kinetics.timeseries import time_series_frame


STATUS_BADGES = {
    StatusTier.STRONG: "🟢 Strong",
    StatusTier.AVERAGE: "🟡 Average",
    StatusTier.WEAK: "🔴 Weak",
}

METRIC_LABELS = {
    'vertical_oscillation': ('Vertical Oscillation', 'cm'),
    'stride_rate': ('Stride Rate', 'spm'),
    'ground_contact_time': ('Ground Contact Time', 'ms'),
    'symmetry_score': ('Symmetry', '%'),
    'efficiency_index': ('Efficiency Index', '/100'),
    'kick_velocity': ('Kick Velocity', 'km/h'),
    'explosive_power': ('Explosive Power', 'W'),
    'plant_foot_stability': ('Plant Foot Stability', '%'),
    'shot_accuracy_prob': ('Shot Accuracy', '%'),
    'stroke_length': ('Stroke Length', 'm'),
    'swolf_score': ('SWOLF', ''),
    'hydrodynamic_drag': ('Drag Coefficient', ''),
    'catch_efficiency': ('Catch Efficiency', '%'),
    'punch_velocity': ('Punch Velocity', 'm/s'),
    'impact_force': ('Impact Force', 'N'),
    'reaction_time': ('Reaction Time', 'ms'),
    'guard_integrity': ('Guard Integrity', '%'),
    'kinetic_chain_efficiency': ('Kinetic Chain', '%'),
    'retraction_speed': ('Retraction Speed', 'm/s'),
    'ground_reaction_force': ('Ground Reaction Force', 'x BW'),
    'elastic_recoil': ('Elastic Recoil', '%'),
}


# ============================================================================
# Helpers
# ============================================================================

@st.cache_resource
def get_store() -> ReportStore:
    config = load_config()
    return ReportStore(get_storage_dir(config), int(config['media_budget_bytes']))


def metrics_table(report: AnalysisReport) -> pd.DataFrame:
    rows = []
    for key, value in report.metrics.as_dict().items():
        label, unit = METRIC_LABELS.get(key, (key, ''))
        rows.append({'Metric': label, 'Value': value, 'Unit': unit})
    return pd.DataFrame(rows)


def schedule_table(report: AnalysisReport) -> pd.DataFrame:
    return pd.DataFrame([
        {
            'Day': d.day,
            'Focus': d.focus,
            'Intensity': d.intensity.value,
            'Drills': ", ".join(d.drills),
        }
        for d in report.schedule
    ])


def history_table(records: list) -> pd.DataFrame:
    return pd.DataFrame([
        {
            'Record': r['id'],
            'Date': r['date'][:19].replace('T', ' '),
            'Sport': r['data']['activity'],
            'Rating': r.get('user_rating') or '',
            'Video': 'yes' if r.get('media_path') else 'no',
        }
        for r in records
    ])


# ============================================================================
# Sections
# ============================================================================

def render_login(store: ReportStore) -> None:
    st.sidebar.header("🔐 Account")
    mode = st.sidebar.radio("Mode", ["Login", "Register"], horizontal=True)
    username = st.sidebar.text_input("Username")
    password = st.sidebar.text_input("Password", type="password")

    if mode == "Register":
        role = st.sidebar.selectbox("Role", ["Athlete", "Coach"])
        if st.sidebar.button("Create account"):
            try:
                user = store.register_user(username, password, role)
            except DuplicateIdentity:
                st.sidebar.error("Username already exists.")
            except ValueError as e:
                st.sidebar.error(str(e))
            else:
                st.session_state['user'] = user
                st.rerun()
    else:
        if st.sidebar.button("Login"):
            user = store.login_user(username, password)
            if user is None:
                st.sidebar.error("Invalid username or password.")
            else:
                st.session_state['user'] = user
                st.rerun()


def render_upload(store: ReportStore, user: dict) -> None:
    st.header("Upload Footage")

    sport = st.selectbox("Sport", [a.value for a in Activity])
    uploaded = st.file_uploader("Video (MP4, MOV, MKV - 5GB limit)", type=["mp4", "mov", "mkv", "avi"])

    if uploaded is None or not st.button("Analyze", type="primary"):
        return

    try:
        check_upload_size(uploaded.size, int(load_config()['max_upload_bytes']))
        payload = uploaded.getvalue()
        with st.spinner("Sampling frames and computing metrics..."):
            report = analyze_video_sync(payload, sport, verbose=False)
    except InputTooLarge as e:
        st.error(str(e))
        return
    except MediaUnreadable:
        st.error("Analysis failed. Please try a valid video file.")
        return

    suffix = Path(uploaded.name).suffix or '.mp4'
    record_id = store.save_analysis(user['id'], report, media=payload, media_suffix=suffix)

    st.session_state['report'] = report
    st.session_state['record_id'] = record_id
    st.session_state['video'] = payload
    st.success(f"Record #{record_id} saved")


def render_report(store: ReportStore, report: AnalysisReport, record_id: int) -> None:
    st.header(f"{report.activity.value} Report")
    st.caption(f"{report.processing_method} · confidence {report.confidence_score:.0%} · "
               f"{report.frames_sampled} frame(s) sampled")

    if st.session_state.get('video'):
        st.video(st.session_state['video'])

    tab1, tab2, tab3, tab4, tab5, tab6 = st.tabs([
        "📈 Overview",
        "💪 Muscle Groups",
        "🏋️ Drills",
        "📊 Time Series",
        "📅 Training Plan",
        "⭐ Feedback",
    ])

    with tab1:
        st.markdown(f"**{report.summary}**")
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Efficiency Index", f"{report.metrics.universal.efficiency_index}/100")
        with col2:
            st.metric("Symmetry", f"{report.metrics.universal.symmetry_score}%")
        with col3:
            st.metric("Projected", report.projected_improvement)

        st.subheader("Speed Tips")
        for tip in report.tips:
            st.markdown(f"- {tip}")

        st.subheader("Metrics")
        st.dataframe(metrics_table(report), use_container_width=True, hide_index=True)

    with tab2:
        for category in report.categories:
            with st.expander(f"{category.name}: {STATUS_BADGES[category.status]}", expanded=True):
                st.progress(category.score / 100, text=f"Score {category.score}/100")
                st.markdown(category.observation)

    with tab3:
        for action in report.actions:
            with st.expander(f"{action.name} ({action.reps})"):
                st.markdown(f"**Target:** {action.target_category}")
                st.markdown(action.description)
                if action.audio_cue:
                    st.caption(f"🔊 {action.audio_cue}")

    with tab4:
        df = time_series_frame(report.time_series).set_index('time')
        st.subheader("Velocity")
        st.line_chart(df['velocity'])
        st.subheader("Force")
        st.line_chart(df['force'])
        st.subheader("Efficiency")
        st.line_chart(df['efficiency'])

    with tab5:
        st.dataframe(schedule_table(report), use_container_width=True, hide_index=True)

    with tab6:
        if record_id is None:
            st.info("Save the report to leave feedback.")
        else:
            rating = st.slider("Rating", min_value=1, max_value=5, value=5)
            feedback = st.text_area("What did we get wrong?")
            if st.button("Submit feedback"):
                store.update_rating(record_id, int(rating), feedback)
                st.success("Thanks! Sensitivity: " + store.get_sensitivity_bias())


def render_history(store: ReportStore, user: dict) -> None:
    st.header("Saved Reports")

    records = store.get_user_analyses(user['id'])
    if not records:
        st.info("No saved reports yet. Upload a clip to get started.")
        return

    st.dataframe(history_table(records), use_container_width=True, hide_index=True)

    selected = st.selectbox("Record", [r['id'] for r in records])
    record = next(r for r in records if r['id'] == selected)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Open"):
            media = store.media_path(record)
            st.session_state['report'] = store.load_report(record)
            st.session_state['record_id'] = record['id']
            st.session_state['video'] = media.read_bytes() if media else None
            st.rerun()
    with col2:
        if st.button("Delete"):
            store.delete_analysis(record['id'])
            if st.session_state.get('record_id') == record['id']:
                st.session_state.pop('report', None)
                st.session_state.pop('record_id', None)
            st.rerun()


# ============================================================================
# Streamlit UI
# ============================================================================

def main():
    """Main Streamlit application."""

    st.set_page_config(
        page_title="Kinetics Coach",
        page_icon="🏃",
        layout="wide"
    )

    st.title("🏃 Kinetics Coach — Biomechanics Dashboard")

    store = get_store()
    user = st.session_state.get('user')

    # Status badge is display-only; the engine never reads it
    st.sidebar.markdown("**Status:** 🔌 LOCAL MODE")

    if user is None:
        render_login(store)
        st.info("Log in or create an account in the sidebar.")
        return

    st.sidebar.markdown(f"**User:** {user['username']} ({user['role']})")
    if st.sidebar.button("Logout"):
        st.session_state.clear()
        st.rerun()

    page = st.sidebar.radio("View", ["Upload", "Report", "History"])

    if page == "Upload":
        render_upload(store, user)
        if 'report' in st.session_state:
            render_report(store, st.session_state['report'], st.session_state.get('record_id'))
    elif page == "Report":
        if 'report' not in st.session_state:
            st.info("No report loaded yet.")
        else:
            render_report(store, st.session_state['report'], st.session_state.get('record_id'))
    else:
        render_history(store, user)


if __name__ == "__main__":
    main()
