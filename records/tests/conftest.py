import pytest


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """Keep uploaded photos out of the project tree."""
    settings.MEDIA_ROOT = tmp_path / 'media'
    return settings.MEDIA_ROOT


@pytest.fixture
def make_staff(db):
    from records.services.staff import register_staff

    def _make(hospital_number, full_name='Test Staff', **fields):
        staff, _ = register_staff({'hospital_number': hospital_number, 'full_name': full_name, **fields})
        return staff
    return _make
