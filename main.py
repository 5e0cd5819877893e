"""
Teachers Digitisation Project — End-to-end analytics pipeline.

Runs the full data pipeline from the teacher register to dashboard-ready
outputs and prints smoke-test summaries. Falls back to simulated records
when no register file is present.

Usage:
    python main.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from teachers_dashboard.config import (
    DOCUMENT_REGISTER_FILE,
    PROJECT_NAME,
    TEACHER_REGISTER_FILE,
)
from teachers_dashboard.dashboard import get_dashboard_overview, get_teacher_table, load_registers
from teachers_dashboard import interaction

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the full analytics pipeline and print smoke-test outputs."""

    print("=" * 70)
    print(f"  {PROJECT_NAME.upper()} — Teacher Dashboard")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data and build typed tables
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING SOURCE DATA")
    print("-" * 40)

    data = load_registers(TEACHER_REGISTER_FILE, DOCUMENT_REGISTER_FILE)
    teachers = data["teachers"]
    documents = data["documents"]
    source = "simulated records" if data["simulated"] else TEACHER_REGISTER_FILE.name
    print(f"\nTeacher register: {source}")

    # ------------------------------------------------------------------
    # 2. Typed tables
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] TEACHER & DOCUMENT TABLES")
    print("-" * 40)

    print(f"\ndim_teacher: {len(teachers)} rows")
    if not teachers.empty:
        print(teachers[["id", "name", "school", "lga"]].head(10).to_string(index=False))
    print(f"\nfact_teacher_document: {len(documents)} rows")
    if not documents.empty:
        print(documents[["teacher_id", "document_type", "filename"]].head(10).to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    overview = get_dashboard_overview(teachers)
    print("\nSummary:")
    for key, value in overview["summary"].items():
        print(f"  {key:16s} | {value}")

    for name in ("by_region", "by_subject", "by_qualification"):
        rows = overview[name]
        print(f"\n{name} ({len(rows)} rows):")
        if not rows.empty:
            print(rows.drop(columns=["total"]).to_string(index=False))

    print("\nTeacher table, search 'academy':")
    table = get_teacher_table(teachers, "academy")
    print(table.head(10).to_string(index=False) if not table.empty else "  (no matches)")

    # Drag across the region chart from the last bar back to the first
    by_region = overview["by_region"]
    state = interaction.ChartSelectionState()
    if len(by_region) > 1:
        state = interaction.pointer_down(state, len(by_region) - 1)
        state = interaction.pointer_move(state, 0)
        state = interaction.pointer_up(state)
    print(f"\nRegion chart selection after drag: {state.bounds}")
    window = interaction.select_window(by_region, state)
    print(f"Rows in selected window: {len(window)}")

    # ------------------------------------------------------------------
    # 4. Acceptance criteria verification
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] ACCEPTANCE CRITERIA CHECKS")
    print("-" * 40)

    total = len(teachers)

    # Check 1: region counts sum to the record total
    check1 = int(by_region["count"].sum()) == total if total else by_region.empty
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] Region counts sum to {total} teachers")

    # Check 2: no group exceeds the total
    group_max = max(
        [int(overview[n]["count"].max()) for n in ("by_region", "by_subject", "by_qualification")
         if not overview[n].empty] or [0]
    )
    check2 = group_max <= total
    print(f"  [{'PASS' if check2 else 'FAIL'}] Largest group ({group_max}) <= total ({total})")

    # Check 3: at most five subjects
    check3 = len(overview["by_subject"]) <= 5
    print(f"  [{'PASS' if check3 else 'FAIL'}] Subject chart has {len(overview['by_subject'])} rows (max 5)")

    # Check 4: percentages within [0, 100]
    pct_ok = all(
        overview[n]["percentage"].between(0, 100).all()
        for n in ("by_region", "by_subject", "by_qualification")
    )
    print(f"  [{'PASS' if pct_ok else 'FAIL'}] All percentages within [0, 100]")

    # Check 5: drag normalised and committed
    check5 = state.bounds in (None, (0, len(by_region) - 1))
    print(f"  [{'PASS' if check5 else 'FAIL'}] Reverse drag committed as {state.bounds}")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
