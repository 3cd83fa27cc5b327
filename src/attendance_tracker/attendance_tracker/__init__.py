"""Attendance Tracker package.

Feature modules (attendance, leave, reconciler, reports, ...) each carry a
model, a repository Protocol with its MySQL implementation, a service and a
thin Flask controller. The attendance state machine and time accounting are
pure functions; services own persistence and retries.
"""
