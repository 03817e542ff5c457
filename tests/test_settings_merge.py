"""Pure settings merge."""
from pinboard.models.user import UserSettings
from pinboard.schemas.settings import PrivacySettingsUpdate, SettingsUpdate
from pinboard.services.settings import load_settings, merge_settings


def test_scalar_update_keeps_other_fields():
    current = UserSettings(language="fr", notifications=False)
    merged = merge_settings(current, SettingsUpdate(dark_mode=True))

    assert merged.dark_mode is True
    assert merged.language == "fr"
    assert merged.notifications is False


def test_nested_update_merges_field_by_field():
    current = UserSettings.model_validate({"privacy": {"profile_visibility": "private"}})
    merged = merge_settings(
        current, SettingsUpdate(privacy=PrivacySettingsUpdate(show_email=True))
    )

    assert merged.privacy.show_email is True
    assert merged.privacy.profile_visibility == "private"
    assert merged.privacy.show_location is False


def test_merge_does_not_mutate_current():
    current = UserSettings()
    merge_settings(current, SettingsUpdate(grid_size="large", language="de"))

    assert current.grid_size == "medium"
    assert current.language == "en"


def test_enum_values_are_stored_as_strings():
    merged = merge_settings(UserSettings(), SettingsUpdate(grid_size="small"))
    dumped = merged.model_dump()

    assert dumped["grid_size"] == "small"
    assert dumped["privacy"]["profile_visibility"] == "public"


def test_empty_update_is_identity():
    current = UserSettings(dark_mode=True)
    assert merge_settings(current, SettingsUpdate()) == current


def test_load_fills_defaults_for_missing_fields():
    loaded = load_settings({"dark_mode": True, "data": {"auto_save": False}})

    assert loaded.dark_mode is True
    assert loaded.data.auto_save is False
    assert loaded.data.cache_size == "medium"
    assert loaded.language == "en"
    assert load_settings(None) == UserSettings()
