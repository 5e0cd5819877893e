"""
Teachers Digitisation Project — Interactive Dashboard

Run with:  streamlit run app.py
"""

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent))

from teachers_dashboard.config import (
    ADMIN_MODE,
    ALLOWED_UPLOAD_EXTENSIONS,
    DOCUMENT_REGISTER_FILE,
    DOCUMENT_TYPES,
    LGAS,
    PROJECT_NAME,
    QUALIFICATION_BAR_COLOR,
    QUALIFICATIONS,
    REGION_BAR_COLOR,
    SCHOOLS,
    SUBJECTS,
    TEACHER_REGISTER_FILE,
)
from teachers_dashboard.dashboard import (
    get_dashboard_overview,
    get_teacher_profile,
    get_teacher_table,
    load_registers,
)
from teachers_dashboard.charts import (
    build_distribution_bar,
    build_subject_pie,
    selection_indices,
)
from teachers_dashboard import interaction
from teachers_dashboard.registry import (
    DocumentUploadError,
    TeacherNotFoundError,
    TeacherValidationError,
    add_document,
    add_teacher,
    delete_teacher,
    documents_for_teacher,
    update_teacher,
)
from teachers_dashboard.sharing import qr_code_png, qr_filename

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Teacher Dashboard",
    page_icon="🎓",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ---------------------------------------------------------------------------
# Data loading (cached)
# ---------------------------------------------------------------------------
@st.cache_data
def load_all_data():
    return load_registers(TEACHER_REGISTER_FILE, DOCUMENT_REGISTER_FILE)


# Edits live in the session; the cached register is only the starting point
if "teachers" not in st.session_state:
    data = load_all_data()
    st.session_state.teachers = data["teachers"].copy()
    st.session_state.documents = data["documents"].copy()

for _chart in ("region", "qualification"):
    st.session_state.setdefault(f"{_chart}_selection", interaction.ChartSelectionState())
    st.session_state.setdefault(f"{_chart}_chart_version", 0)
    st.session_state.setdefault(f"{_chart}_last_points", [])
st.session_state.setdefault("subject_hover", interaction.HoverState())

teachers: pd.DataFrame = st.session_state.teachers
documents: pd.DataFrame = st.session_state.documents

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("Teacher Dashboard")
st.sidebar.markdown(PROJECT_NAME)
st.sidebar.divider()

page = st.sidebar.radio(
    "Navigate",
    ["Dashboard", "Teachers", "Teacher Form", "Documents", "Share Profile"],
)

st.sidebar.divider()
st.sidebar.caption(
    f"Register: {TEACHER_REGISTER_FILE.name}" if TEACHER_REGISTER_FILE.exists()
    else "Register: simulated records"
)
if ADMIN_MODE:
    st.sidebar.caption("Administrator mode")


def teacher_options(df: pd.DataFrame) -> dict[int, str]:
    return {int(row["id"]): f"{row['name']} ({row['school']})" for _, row in df.iterrows()}


# ---------------------------------------------------------------------------
# Helper: draggable bar chart
# ---------------------------------------------------------------------------
def draggable_bar(chart: str, rows: pd.DataFrame, key: str, color: str, title: str, caption: str):
    """Render a bar chart whose box selection drives the chart's drag state."""
    state_key = f"{chart}_selection"

    head, reset_col = st.columns([6, 1])
    with head:
        st.subheader(title)
        st.caption(caption)
    with reset_col:
        if st.button("↺ Reset", key=f"{chart}_reset"):
            st.session_state[state_key] = interaction.reset(st.session_state[state_key])
            st.session_state[f"{chart}_last_points"] = []
            # A fresh widget key clears the selection plotly still shows
            st.session_state[f"{chart}_chart_version"] += 1

    # Rows may have shrunk since the last drag
    st.session_state[state_key] = interaction.clamp_selection(st.session_state[state_key], len(rows))

    fig = build_distribution_bar(rows, key, st.session_state[state_key], color)
    event = st.plotly_chart(
        fig,
        use_container_width=True,
        on_select="rerun",
        selection_mode=("box", "points"),
        key=f"{chart}_chart_{st.session_state[f'{chart}_chart_version']}",
    )

    points = selection_indices(event)
    if points and points != st.session_state[f"{chart}_last_points"]:
        st.session_state[f"{chart}_last_points"] = points
        st.session_state[state_key] = interaction.replay_drag(
            st.session_state[state_key], points[0], points[-1]
        )
        st.rerun()

    selection = st.session_state[state_key]
    window = interaction.select_window(rows, selection)
    if selection.bounds is not None and not window.empty:
        st.caption(
            f"Selected: {window['label'].iloc[0]} → {window['label'].iloc[-1]} "
            f"({int(window['count'].sum())} teacher entries)"
        )
        st.dataframe(
            window[[key, "count", "percentage"]],
            use_container_width=True,
            hide_index=True,
        )


# ===========================================================================
# PAGE: Dashboard
# ===========================================================================
if page == "Dashboard":
    st.title("Teacher Dashboard")

    overview = get_dashboard_overview(teachers)
    summary = overview["summary"]

    cols = st.columns(4)
    cols[0].metric("Total Teachers", summary["total_teachers"])
    cols[1].metric("Schools", summary["schools"])
    cols[2].metric("LGAs", summary["lgas"])
    cols[3].metric("Subjects", summary["subjects"])

    st.divider()

    col1, col2 = st.columns(2)

    with col1:
        draggable_bar(
            "region",
            overview["by_region"],
            "lga",
            REGION_BAR_COLOR,
            "Teachers by LGA",
            "Distribution of teachers across Local Government Areas. Drag across bars to select a range.",
        )

    with col2:
        st.subheader("Subject Distribution")
        st.caption("Top subjects taught across all schools")

        subject_rows = overview["by_subject"]
        labels = subject_rows["label"].tolist()
        highlighted = st.selectbox(
            "Highlight subject",
            [None] + list(range(len(labels))),
            format_func=lambda i: "(none)" if i is None else labels[i],
            key=f"subject_highlight_{len(labels)}",
        )
        if highlighted is None:
            st.session_state.subject_hover = interaction.pointer_leave(st.session_state.subject_hover)
        else:
            st.session_state.subject_hover = interaction.pointer_enter(st.session_state.subject_hover, highlighted)

        st.plotly_chart(
            build_subject_pie(subject_rows, st.session_state.subject_hover),
            use_container_width=True,
        )

    draggable_bar(
        "qualification",
        overview["by_qualification"],
        "qualification",
        QUALIFICATION_BAR_COLOR,
        "Qualification Distribution",
        "Teacher qualifications across the system",
    )


# ===========================================================================
# PAGE: Teachers
# ===========================================================================
elif page == "Teachers":
    st.title("Teachers")

    term = st.text_input("Search teachers...", placeholder="Name, school or LGA")
    table = get_teacher_table(teachers, term)

    st.caption(f"{len(table)} of {len(teachers)} teachers")
    st.dataframe(
        table.rename(columns={
            "name": "Name",
            "school": "School",
            "lga": "LGA",
            "subjects_taught": "Subjects",
            "qualifications": "Qualifications",
        }),
        use_container_width=True,
        hide_index=True,
    )

    if ADMIN_MODE and not table.empty:
        st.divider()
        st.subheader("Delete teacher")
        options = teacher_options(teachers[teachers["id"].isin(table["id"])])
        to_delete = st.selectbox("Teacher", list(options), format_func=options.get)
        if st.button("Delete", type="primary"):
            try:
                st.session_state.teachers = delete_teacher(teachers, to_delete, is_admin=ADMIN_MODE)
            except (PermissionError, TeacherNotFoundError) as e:
                st.error(f"Failed to delete teacher: {e}")
            else:
                st.success("Teacher deleted successfully")
                st.rerun()


# ===========================================================================
# PAGE: Teacher Form
# ===========================================================================
elif page == "Teacher Form":
    mode = st.radio("Mode", ["Add New Teacher", "Edit Teacher"], horizontal=True)
    editing = mode == "Edit Teacher"

    current: dict = {}
    teacher_id = None
    if editing:
        if teachers.empty:
            st.info("No teachers to edit yet.")
            st.stop()
        options = teacher_options(teachers)
        teacher_id = st.selectbox("Teacher", list(options), format_func=options.get)
        current = teachers[teachers["id"] == teacher_id].iloc[0].to_dict()

    st.title(mode)

    # Keep values outside the reference lists selectable when editing
    qual_options = list(dict.fromkeys(QUALIFICATIONS + list(current.get("qualification_list", []))))
    subject_options = list(dict.fromkeys(SUBJECTS + list(current.get("subject_list", []))))
    school_options = list(dict.fromkeys(SCHOOLS + ([current["school"]] if current.get("school") else [])))
    lga_options = list(dict.fromkeys(LGAS + ([current["lga"]] if current.get("lga") else [])))

    with st.form("teacher_form"):
        name = st.text_input("Name", value=current.get("name") or "")
        email = st.text_input("Email", value=current.get("email") or "")
        qualifications = st.multiselect(
            "Qualifications", qual_options, default=list(current.get("qualification_list", []))
        )
        subjects = st.multiselect(
            "Subjects Taught", subject_options, default=list(current.get("subject_list", []))
        )
        school = st.selectbox(
            "School", school_options,
            index=school_options.index(current["school"]) if current.get("school") else 0,
        )
        lga = st.selectbox(
            "LGA", lga_options,
            index=lga_options.index(current["lga"]) if current.get("lga") else 0,
        )
        employment_default = current.get("employment_date")
        employment_date = st.date_input(
            "Employment Date",
            value=employment_default.date() if pd.notna(employment_default)
            else pd.Timestamp.today().date(),
        )
        submitted = st.form_submit_button("Update Teacher" if editing else "Add Teacher")

    if submitted:
        form = {
            "name": name,
            "email": email,
            "qualifications": qualifications,
            "subjects_taught": subjects,
            "school": school,
            "lga": lga,
            "employment_date": employment_date,
        }
        try:
            if editing:
                st.session_state.teachers, record = update_teacher(teachers, teacher_id, form)
            else:
                st.session_state.teachers, record = add_teacher(teachers, form, user_id=1)
        except TeacherValidationError as e:
            for field, message in e.errors.items():
                st.error(f"{field}: {message}")
        except TeacherNotFoundError:
            st.error("Teacher not found")
        else:
            st.success(f"Teacher {'updated' if editing else 'added'} successfully")


# ===========================================================================
# PAGE: Documents
# ===========================================================================
elif page == "Documents":
    st.title("Documents")
    st.caption("Upload teacher credentials and certificates")

    if teachers.empty:
        st.info("Add a teacher before uploading documents.")
        st.stop()

    options = teacher_options(teachers)
    teacher_id = st.selectbox("Teacher", list(options), format_func=options.get)

    with st.form("document_upload", clear_on_submit=True):
        document_type = st.selectbox("Document Type", DOCUMENT_TYPES, index=None,
                                     placeholder="Select document type")
        uploaded = st.file_uploader(
            "File",
            type=sorted(ext.lstrip(".") for ext in ALLOWED_UPLOAD_EXTENSIONS),
        )
        submitted = st.form_submit_button("Upload Document")

    if submitted:
        if uploaded is None or document_type is None:
            st.error("Please select a file and document type")
        else:
            try:
                st.session_state.documents, record = add_document(
                    documents, teacher_id, uploaded.name, uploaded.type, document_type
                )
            except DocumentUploadError as e:
                st.error(str(e))
            else:
                st.success("Document uploaded successfully")

    existing = documents_for_teacher(st.session_state.documents, teacher_id)
    if existing.empty:
        st.info("No documents uploaded yet.")
    else:
        st.dataframe(
            existing[["document_type", "filename", "mime_type", "uploaded_at"]],
            use_container_width=True,
            hide_index=True,
        )


# ===========================================================================
# PAGE: Share Profile
# ===========================================================================
elif page == "Share Profile":
    st.title("Share Teacher Profile")

    if teachers.empty:
        st.info("No teachers recorded yet.")
        st.stop()

    options = teacher_options(teachers)
    teacher_id = st.selectbox("Teacher", list(options), format_func=options.get)
    profile = get_teacher_profile(teachers, documents, teacher_id)
    teacher = profile["teacher"]

    col1, col2 = st.columns([1, 2])

    with col1:
        st.subheader("Teacher Profile QR Code")
        png = qr_code_png(profile["profile_url"])
        st.image(png, width=200)
        st.download_button(
            "Download QR Code",
            data=png,
            file_name=qr_filename(teacher["name"]),
            mime="image/png",
            use_container_width=True,
        )

    with col2:
        st.subheader(profile["share"]["title"])
        st.write(profile["share"]["text"])
        st.code(profile["profile_url"], language=None)

        links = profile["share_links"]
        b1, b2, b3 = st.columns(3)
        b1.link_button("Twitter", links["twitter"], use_container_width=True)
        b2.link_button("LinkedIn", links["linkedin"], use_container_width=True)
        b3.link_button("Facebook", links["facebook"], use_container_width=True)

        st.divider()
        st.markdown(f"**Documents on file:** {len(profile['documents'])}")
