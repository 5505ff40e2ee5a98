"""Tests for watering alert rendering and posting."""

from datetime import timedelta

from app.modules.plant_management.domain.services.notification_presenter import (
    REMINDER_CHANNEL_ID,
    NotificationPresenter,
)
from app.modules.plant_management.infrastructure.notifications.notification_center import (
    InMemoryNotificationCenter,
)

from conftest import START


def test_render_texts():
    assert NotificationPresenter.render_title("Basil") == "🌱 Time to water Basil!"
    assert NotificationPresenter.render_body("Basil") == (
        "It's time to water Basil! Tap to open the app and mark it as watered."
    )


def test_present_posts_keyed_by_plant(presenter, sink):
    assert presenter.present(4, "Basil") is True

    notification = sink.posted[4]
    assert notification.key == 4
    assert notification.plant_name == "Basil"
    assert notification.channel_id == REMINDER_CHANNEL_ID
    assert notification.posted_at == START


def test_present_replaces_existing_alert(presenter, sink, clock):
    presenter.present(4, "Basil")
    clock.advance(timedelta(days=1))
    presenter.present(4, "Sweet Basil")

    assert len(presenter.active()) == 1
    assert presenter.active()[0].plant_name == "Sweet Basil"
    assert len(sink.history) == 2


def test_present_skipped_when_notifications_disabled(presenter, sink, capabilities):
    capabilities.set_notifications_enabled(False)

    assert presenter.present(4, "Basil") is False
    assert sink.history == []


def test_dismiss(presenter):
    presenter.present(4, "Basil")

    assert presenter.dismiss(4) is True
    assert presenter.dismiss(4) is False
    assert presenter.active() == []


def test_notification_center_lists_newest_first(capabilities, clock):
    center = InMemoryNotificationCenter()
    presenter = NotificationPresenter(center, capabilities, clock)

    presenter.present(1, "Fern")
    clock.advance(timedelta(minutes=5))
    presenter.present(2, "Cactus")

    assert [n.plant_id for n in center.list_active()] == [2, 1]
    assert center.cancel(1) is True
    assert [n.plant_id for n in center.list_active()] == [2]


def test_capability_flags_report_changes(capabilities):
    assert capabilities.set_exact_alarms_allowed(True) is False
    assert capabilities.set_exact_alarms_allowed(False) is True
    assert capabilities.snapshot() == {"exact_alarms_allowed": False, "notifications_enabled": True}
