"""
Internship application workflow app.

Owns the application lifecycle:
pending → under_review → shortlisted → interview_scheduled → approved
(any non-terminal state may also move to rejected)

Key concepts:
- Fixed transition table on ApplicationStatus
- StatusTransitionEngine commits status + audit log atomically
- Append-only ApplicationStatusLog audit trail
- Domain events handed to apps.notify after commit
"""
