"""End-to-end tests for webhook verification."""

from hypothesis import HealthCheck, given, settings, strategies as st


class TestWebhookVerification:
    """Test Facebook webhook verification endpoint."""

    def test_webhook_verification_success(self, test_client):
        """Correct token and a mode answer with the challenge."""
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "test-verify-token-123",
                "hub.challenge": "challenge-123",
            },
        )

        assert response.status_code == 200
        assert response.text == "challenge-123"
        # Should be plain text, not JSON
        assert response.headers["content-type"] == "text/plain; charset=utf-8"

    def test_any_mode_is_accepted(self, test_client):
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "unsubscribe",
                "hub.verify_token": "test-verify-token-123",
                "hub.challenge": "c",
            },
        )

        assert response.status_code == 200
        assert response.text == "c"

    def test_webhook_verification_fails_invalid_token(self, test_client):
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "wrong-token",
                "hub.challenge": "challenge-123",
            },
        )

        assert response.status_code == 403
        assert response.content == b""

    def test_webhook_verification_fails_without_mode(self, test_client):
        response = test_client.get(
            "/webhook",
            params={
                "hub.verify_token": "test-verify-token-123",
                "hub.challenge": "challenge-123",
            },
        )

        assert response.status_code == 403

    def test_webhook_verification_fails_empty_mode(self, test_client):
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "",
                "hub.verify_token": "test-verify-token-123",
                "hub.challenge": "challenge-123",
            },
        )

        assert response.status_code == 403

    def test_webhook_verification_no_parameters(self, test_client):
        response = test_client.get("/webhook")

        assert response.status_code == 403

    def test_missing_challenge_returns_empty_body(self, test_client):
        response = test_client.get(
            "/webhook",
            params={"hub.mode": "subscribe", "hub.verify_token": "test-verify-token-123"},
        )

        assert response.status_code == 200
        assert response.text == ""

    @settings(
        max_examples=25,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    @given(
        challenge=st.text(
            alphabet=st.characters(min_codepoint=33, max_codepoint=126),
            min_size=1,
            max_size=64,
        )
    )
    def test_challenge_echoed_exactly(self, test_client, challenge: str):
        """Property: the body is exactly the challenge value."""
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "test-verify-token-123",
                "hub.challenge": challenge,
            },
        )

        assert response.status_code == 200
        assert response.text == challenge

    @settings(
        max_examples=25,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    @given(
        token=st.text(
            alphabet=st.characters(blacklist_categories=("Cs", "Cc")),
            min_size=1,
            max_size=40,
        ).filter(lambda t: t != "test-verify-token-123")
    )
    def test_wrong_tokens_always_forbidden(self, test_client, token: str):
        """Property: any other token is refused."""
        response = test_client.get(
            "/webhook",
            params={"hub.mode": "subscribe", "hub.verify_token": token, "hub.challenge": "c"},
        )

        assert response.status_code == 403
