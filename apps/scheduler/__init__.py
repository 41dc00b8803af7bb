"""
Scheduler App - Recurring Help Fetch

Responsibilities:
- Spawn the help endpoints fetch (apps.fetcher.help) as a child process
  immediately on start and then every SCHEDULE_INTERVAL_MINUTES (default 15)
- Log each child's exit code and any spawn error without stopping the timer
- Run until terminated externally (SIGINT/SIGTERM)

Runs are not mutually exclusive: a tick that fires while a previous child is
still running starts another one unless SCHEDULE_SKIP_IF_RUNNING is set.
"""
