"""Payment Resources - checkout session creation and verification."""


async def test_create_session_returns_checkout_url(logged_in_api):
    session = await logged_in_api.payments.create_payment_session(
        2, "trilingo://paid", "trilingo://cancel",
    )
    assert session.session_id == "cs_test_1"
    assert session.session_url.startswith("https://checkout.test/")
    assert not session.already_has_access


async def test_unlocked_level_needs_no_checkout(logged_in_api):
    session = await logged_in_api.payments.create_payment_session(1, "s", "c")
    assert session.already_has_access


async def test_verify_payment(logged_in_api):
    paid = await logged_in_api.payments.verify_payment("cs_test_1")
    unpaid = await logged_in_api.payments.verify_payment("cs_other")
    assert paid.has_access
    assert not unpaid.has_access
    assert unpaid.error == "Session not paid"
