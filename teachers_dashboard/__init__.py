"""
Teachers Digitisation Project — Analytics Dashboard

Analytics backend for the regional teacher register: turns teacher and
supporting-document registers into dashboard-ready summaries, charts and
record-management operations.

To swap the Excel/CSV register for a database feed:
    Replace loader functions in teachers_dashboard.loaders with queries
    against the teachers / teacher_documents tables. The DataFrame schemas
    in config.TEACHER_COLUMNS and config.DOCUMENT_COLUMNS remain unchanged.

To connect to Streamlit/Dash:
    Call dashboard.get_dashboard_overview(records) for the summary card and
    the three grouped count tables, then render them with the builders in
    teachers_dashboard.charts. Keep one interaction.ChartSelectionState per
    draggable chart in the UI session.

To change the chart groupings:
    Adjust config.TOP_SUBJECT_COUNT or config.QUALIFICATION_LABEL_MAX, or add
    a new counting function to aggregations alongside count_by_region.
"""
