import pytest

from notifications.domain.notification_templates import UnknownEventType, render_notification


@pytest.mark.unit
class TestRenderNotification:
    def test_new_proposal(self):
        title, message = render_notification(
            "NEW_PROPOSAL", {"actor_name": "Thabo", "subject": "Fix my roof"}
        )

        assert title == "New Proposal Received"
        assert message == "Thabo has submitted a proposal for your request: Fix my roof"

    def test_new_message_uses_sender_name(self):
        _, message = render_notification("NEW_MESSAGE", {"actor_name": "Lerato", "subject": "hi"})

        assert message == "You have a new message from Lerato"

    def test_review_includes_rating(self):
        _, message = render_notification("NEW_REVIEW", {"actor_name": "Zanele", "subject": "Tutoring", "rating": 4})

        assert "4-star" in message

    def test_transaction_status_with_own_template(self):
        title, _ = render_notification("TRANSACTION_CANCELLED", {"actor_name": "Nomsa", "subject": "Paving"})

        assert title == "Transaction Cancelled"

    def test_transaction_status_fallback(self):
        title, message = render_notification("TRANSACTION_DISPUTED", {"actor_name": "Nomsa", "subject": "Paving"})

        assert title == "Transaction Updated"
        assert message == "Nomsa has updated the transaction status to DISPUTED for: Paving"

    def test_missing_placeholders_render_empty(self):
        _, message = render_notification("PROPOSAL_ACCEPTED", {})

        assert message == "Someone has accepted your proposal for: "

    def test_unknown_event(self):
        with pytest.raises(UnknownEventType):
            render_notification("USER_LOGGED_IN", {})
