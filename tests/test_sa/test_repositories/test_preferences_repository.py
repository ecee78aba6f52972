# tests/test_sa/test_repositories/test_preferences_repository.py

import pytest
from pagestreak import config
from pagestreak.sa.models import NotificationPreferences, UserPreferences
from pagestreak.sa.repositories.preferences import PreferencesRepository

@pytest.fixture
def preferences_repo(db_session):
    """Fixture to create a PreferencesRepository instance."""
    return PreferencesRepository(db_session)

def test_defaults_are_seeded(preferences_repo):
    user = preferences_repo.get_user_preferences()
    assert user.username == "Reader"
    assert user.yearly_book_goal == 12
    notifications = preferences_repo.get_notification_preferences()
    assert notifications.notifications_enabled is True
    assert notifications.daily_reminder_enabled is True
    assert notifications.daily_reminder_hours_after_last_open == config.DEFAULT_REMINDER_HOURS
    assert notifications.daily_reminder_title == config.DEFAULT_REMINDER_TITLE

def test_ensure_defaults_is_idempotent(db_session, preferences_repo):
    preferences_repo.ensure_defaults()
    preferences_repo.ensure_defaults()
    assert db_session.query(UserPreferences).count() == 1
    assert db_session.query(NotificationPreferences).count() == 1

def test_daily_goal_defaults(preferences_repo):
    assert preferences_repo.get_daily_goal() == config.DEFAULT_DAILY_GOAL
    assert preferences_repo.get_daily_goal(default=45) == 45

def test_set_daily_goal(preferences_repo):
    prefs = preferences_repo.set_daily_goal(50)
    assert prefs.current_reading_rate_last_updated is not None
    assert preferences_repo.get_daily_goal() == 50

@pytest.mark.parametrize("minutes", [0, -15])
def test_set_daily_goal_rejects_non_positive(preferences_repo, minutes):
    with pytest.raises(ValueError):
        preferences_repo.set_daily_goal(minutes)

def test_missing_user_row(db_session, preferences_repo):
    db_session.query(UserPreferences).delete()
    db_session.commit()
    assert preferences_repo.has_user() is False
    assert preferences_repo.get_daily_goal() == config.DEFAULT_DAILY_GOAL

def test_update_user_preferences_rejects_unknown_field(preferences_repo):
    with pytest.raises(ValueError, match="Unknown user preference fields"):
        preferences_repo.update_user_preferences(favourite_colour="green")

def test_notification_preferences_created_on_access(db_session, preferences_repo):
    db_session.query(NotificationPreferences).delete()
    db_session.commit()
    prefs = preferences_repo.get_notification_preferences()
    assert prefs.daily_reminder_enabled is True

def test_update_notification_preferences(preferences_repo):
    prefs = preferences_repo.update_notification_preferences(
        daily_reminder_hours_after_last_open=3,
        daily_reminder_title="Read!"
    )
    assert prefs.daily_reminder_hours_after_last_open == 3
    assert prefs.daily_reminder_title == "Read!"

def test_update_notification_preferences_validates_hours(preferences_repo):
    with pytest.raises(ValueError):
        preferences_repo.update_notification_preferences(daily_reminder_hours_after_last_open=0)
