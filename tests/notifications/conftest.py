import pytest
from notifications.alert.dispatch import AlertDispatcher, DispatcherConfig
from notifications.channel import FakeAlertChannel


@pytest.fixture()
def email_channel():
    return FakeAlertChannel(message_style="email", name="email")


@pytest.fixture()
def relay_channel():
    return FakeAlertChannel(message_style="text", name="relay")


@pytest.fixture()
def dispatcher(email_channel, relay_channel):
    dispatcher = AlertDispatcher(
        DispatcherConfig(channels={"email": email_channel, "relay": relay_channel}, timeout=5.0)
    )
    yield dispatcher
    dispatcher.shutdown(wait=True)
