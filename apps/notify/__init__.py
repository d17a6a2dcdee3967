"""
Notifications app.

Records every workflow notification in an idempotent log before handing it
to a delivery driver, so retried or duplicated triggers send at most once.
"""
