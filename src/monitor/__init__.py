"""Voice Scam Shield live monitor — timer-driven risk aggregation.

Modules
───────
  sampler     — random-walk RiskSample generator (injectable RNG)
  classifier  — risk score → live tier / alert severity
  alerts      — alert store: raise, dismiss, announce bookkeeping
  announcer   — fire-and-forget speech output for due alerts
  session     — one monitored call: tick processing and escalation
  scheduler   — fixed-period tick timer with prompt cancellation
  languages   — supported / selected call languages
  recorder    — write sample and alert history (CSV, JSONL)
  cli         — argparse entry-point
"""
