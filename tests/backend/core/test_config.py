import pytest

from backend.core import config


def test_parse_slot_catalogue_defaults_to_twelve_hour_variant() -> None:
    catalogue = config.parse_slot_catalogue(None)

    assert catalogue == config.TWELVE_HOUR_SLOT_CATALOGUE
    assert catalogue[0] == '09:00 AM'
    assert catalogue[-1] == '11:30 PM'
    assert '01:00 PM' not in catalogue


def test_parse_slot_catalogue_selects_named_variant() -> None:
    assert config.parse_slot_catalogue('', variant=' 24H ') == config.TWENTY_FOUR_HOUR_SLOT_CATALOGUE


def test_parse_slot_catalogue_keeps_configured_order() -> None:
    catalogue = config.parse_slot_catalogue('10:00 AM, 09:00 AM ,14:30')

    assert catalogue == ('10:00 AM', '09:00 AM', '14:30')


@pytest.mark.parametrize(
    ('raw', 'variant', 'message'),
    [
        ('09:00 AM,25:00', '12h', 'Invalid SLOT_CATALOGUE entry'),
        ('09:00 AM,09:00 AM', '12h', 'Duplicate SLOT_CATALOGUE entry'),
        (' , ', '12h', 'SLOT_CATALOGUE is empty'),
        (None, 'weekly', 'Invalid SLOT_CATALOGUE_VARIANT'),
    ],
)
def test_parse_slot_catalogue_rejects_bad_input(raw: str | None, variant: str, message: str) -> None:
    with pytest.raises(RuntimeError, match=message):
        config.parse_slot_catalogue(raw, variant=variant)


def test_validate_runtime_config_requires_secrets_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'JWT_SECRET_KEY', 'change-me')

    with pytest.raises(RuntimeError, match='JWT_SECRET_KEY'):
        config.validate_runtime_config()

    monkeypatch.setattr(config, 'JWT_SECRET_KEY', 'real-secret')
    monkeypatch.setattr(config, 'ADMIN_PASSWORD', 'change-me')

    with pytest.raises(RuntimeError, match='ADMIN_PASSWORD'):
        config.validate_runtime_config()
