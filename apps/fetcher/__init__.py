"""
Fetcher App - One-shot AccessPlanIt Fetches

Responsibilities:
- Validate credentials before any network activity
- Exchange username/password for a bearer token (once per run)
- Run all configured fetch jobs concurrently and wait for every one to settle
- Write each raw JSON response to a uniquely named file under OUTPUT_DIR
- Log a per-job success/failure summary

Entry points:
- python -m apps.fetcher.course_data [--limit N]
    course-templates-<ts>.json, course-dates-<ts>.json
- python -m apps.fetcher.help
    course-date-help-<ts>.json, course-template-help-<ts>.json

Exit codes:
- 0: run completed (individual jobs may have failed)
- 1: missing credentials or token exchange failed
- 2: invalid command line arguments
"""
