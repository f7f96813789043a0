import pytest

from training_center.config import Settings
from training_center.__main__ import STARTUP_MESSAGE, main


def test_default_secret_rejected_outside_dev(monkeypatch):
    monkeypatch.setenv('ENV', 'prod')
    monkeypatch.delenv('JWT_SECRET', raising=False)
    monkeypatch.delenv('ALLOW_INSECURE_JWT', raising=False)
    with pytest.raises(RuntimeError):
        Settings()


def test_insecure_override_and_database_url(monkeypatch):
    monkeypatch.setenv('ENV', 'prod')
    monkeypatch.setenv('ALLOW_INSECURE_JWT', 'true')
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///elsewhere.db')
    s = Settings()
    assert s.DATABASE_URL == 'sqlite:///elsewhere.db'
    assert s.JWT_ALGORITHM == 'HS256'


def test_entrypoint_prints_startup_message(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out.strip() == STARTUP_MESSAGE


def test_entrypoint_init_db(capsys):
    assert main(['--init-db']) == 0
    assert STARTUP_MESSAGE in capsys.readouterr().out


def test_entrypoint_seeds_admin_once(capsys):
    assert main(['--create-admin', 'cli-admin', '--password', 'pw']) == 0
    assert 'created admin: cli-admin' in capsys.readouterr().out
    assert main(['--create-admin', 'cli-admin', '--password', 'pw']) == 0
    assert 'exists:' in capsys.readouterr().out


def test_create_admin_requires_password():
    with pytest.raises(SystemExit):
        main(['--create-admin', 'nopass'])
