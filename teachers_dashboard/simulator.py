"""
Simulated data generator for the teachers dashboard.

Generates a plausible teacher register and supporting-document table from
the reference lists in config. All values are synthetic; no real personal
data is used.
"""

import numpy as np
import pandas as pd

from .config import DOCUMENT_TYPES, LGAS, QUALIFICATIONS, SCHOOLS, SUBJECTS, UPLOAD_DIR

# ---------------------------------------------------------------------------
# Name parts and skew (some LGAs and subjects are much more common)
# ---------------------------------------------------------------------------
_FIRST_NAMES = [
    "Amina", "Chinedu", "Fatima", "Emeka", "Ngozi", "Tunde", "Halima", "Ifeanyi",
    "Zainab", "Olumide", "Kemi", "Yusuf", "Adaeze", "Bala", "Funmi", "Segun",
]
_LAST_NAMES = [
    "Okafor", "Bello", "Adeyemi", "Eze", "Musa", "Okonkwo", "Ibrahim", "Balogun",
    "Nwosu", "Abubakar", "Ogunleye", "Danjuma",
]

_LGA_WEIGHTS = [0.4, 0.25, 0.2, 0.15]
_SUBJECT_WEIGHTS = [0.28, 0.24, 0.2, 0.12, 0.1, 0.06]
_QUALIFICATION_WEIGHTS = [0.4, 0.15, 0.2, 0.15, 0.1]

_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".png": "image/png",
}


def _pick_several(rng: np.random.Generator, options: list[str], weights: list[float], max_n: int) -> str:
    n = int(rng.integers(1, max_n + 1))
    picks = rng.choice(len(options), size=n, replace=False, p=weights)
    return ", ".join(options[i] for i in sorted(picks))


def generate_teacher_records(
    n_teachers: int = 60,
    seed: int = 42,
    start_date: str = "2008-01-01",
) -> pd.DataFrame:
    """Generate a simulated teacher register.

    Subjects (1-3 per teacher) and qualifications (1-2 per teacher) are
    comma-joined, as they are stored in the live register.
    """
    rng = np.random.default_rng(seed)
    start = pd.Timestamp(start_date)
    span_days = (pd.Timestamp("2025-09-01") - start).days

    rows = []
    for i in range(1, n_teachers + 1):
        first = _FIRST_NAMES[int(rng.integers(len(_FIRST_NAMES)))]
        last = _LAST_NAMES[int(rng.integers(len(_LAST_NAMES)))]
        employed = start + pd.Timedelta(days=int(rng.integers(span_days)))
        created = pd.Timestamp("2025-10-01") + pd.Timedelta(hours=int(rng.integers(24 * 30)))

        rows.append({
            "id": i,
            "name": f"{first} {last}",
            # Roughly one teacher in eight has no email on file
            "email": None if rng.random() < 0.12 else f"{first}.{last}{i}@schools.example.org".lower(),
            "qualifications": _pick_several(rng, QUALIFICATIONS, _QUALIFICATION_WEIGHTS, 2),
            "subjects_taught": _pick_several(rng, SUBJECTS, _SUBJECT_WEIGHTS, 3),
            "school": SCHOOLS[int(rng.integers(len(SCHOOLS)))],
            "lga": LGAS[int(rng.choice(len(LGAS), p=_LGA_WEIGHTS))],
            "employment_date": employed,
            "created_at": created,
            "updated_at": created,
            "user_id": 1,
        })

    return pd.DataFrame(rows)


def generate_documents(teachers: pd.DataFrame, seed: int = 7) -> pd.DataFrame:
    """Generate 0-3 supporting documents per teacher."""
    rng = np.random.default_rng(seed)
    rows = []
    doc_id = 1

    for _, teacher in teachers.iterrows():
        for _ in range(int(rng.integers(0, 4))):
            document_type = DOCUMENT_TYPES[int(rng.integers(len(DOCUMENT_TYPES)))]
            extension = list(_MIME_TYPES)[int(rng.integers(len(_MIME_TYPES)))]
            filename = document_type.lower().replace(" ", "_") + extension
            uploaded = teacher["created_at"] + pd.Timedelta(hours=int(rng.integers(1, 72)))

            rows.append({
                "id": doc_id,
                "teacher_id": int(teacher["id"]),
                "filename": filename,
                "mime_type": _MIME_TYPES[extension],
                "file_path": str(UPLOAD_DIR / f"{int(uploaded.timestamp() * 1000)}-{filename}"),
                "document_type": document_type,
                "uploaded_at": uploaded,
            })
            doc_id += 1

    return pd.DataFrame(rows)
