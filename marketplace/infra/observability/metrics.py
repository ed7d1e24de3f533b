from prometheus_client import Counter, Histogram


# Proposal Metrics
proposals_submitted_total = Counter("marketplace_proposals_submitted_total", "Total proposals submitted")
proposals_decided_total = Counter(
    "marketplace_proposals_decided_total", "Proposals accepted, rejected or completed", ["status"]
)
proposal_price = Histogram(
    "marketplace_proposal_price",
    "Proposal price distribution",
    buckets=[50, 100, 250, 500, 1000, 2500, 5000, 10000, float("inf")],
)

# Transaction Metrics
transaction_status_changes_total = Counter(
    "marketplace_transaction_status_changes_total", "Transaction status changes", ["status"]
)
payments_processed_total = Counter("marketplace_payments_processed_total", "Payments processed", ["method"])
reviews_submitted_total = Counter("marketplace_reviews_submitted_total", "Ratings left on transactions", ["role"])

# Messaging / notification Metrics
messages_sent_total = Counter("marketplace_messages_sent_total", "Total chat messages sent")
notifications_created_total = Counter("marketplace_notifications_created_total", "Notifications created", ["type"])

# Failure Metrics
event_dispatch_failures_total = Counter(
    "marketplace_event_dispatch_failures_total", "Events whose side effects failed after commit", ["event_type"]
)
