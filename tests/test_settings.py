import pytest

from humble_notion_sync.errors import ConfigError
from humble_notion_sync.utils.settings import load_settings

ENV_VARS = ["NOTION_TOKEN", "LOG_LEVEL", "BUNDLES_DB_ID", "BOOKS_DB_ID", "HUMBLE_EMAIL", "HUMBLE_PASSWORD", "HUMBLE_HEADLESS"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_token_is_a_config_error():
    with pytest.raises(ConfigError) as exc:
        load_settings(_env_file=None)

    assert "NOTION_TOKEN" in str(exc.value)


def test_blank_token_is_a_config_error(monkeypatch):
    monkeypatch.setenv("NOTION_TOKEN", "   ")

    with pytest.raises(ConfigError):
        load_settings(_env_file=None)


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("NOTION_TOKEN", "tok")
    monkeypatch.setenv("BUNDLES_DB_ID", "abc")
    monkeypatch.setenv("HUMBLE_HEADLESS", "true")

    s = load_settings(_env_file=None)

    assert s.NOTION_TOKEN == "tok"
    assert s.NOTION_VERSION == "2022-06-28"
    assert s.require_bundles_db() == "abc"
    assert s.HUMBLE_HEADLESS is True


def test_env_file_is_read(tmp_path):
    env = tmp_path / ".env"
    env.write_text("NOTION_TOKEN=from-file\nBOOKS_DB_ID=books\n", encoding="utf-8")

    s = load_settings(_env_file=env)

    assert s.NOTION_TOKEN == "from-file"
    assert s.require_books_db() == "books"


def test_argument_overrides_configured_database(monkeypatch):
    monkeypatch.setenv("BUNDLES_DB_ID", "from-env")

    s = load_settings(_env_file=None, NOTION_TOKEN="tok")

    assert s.require_bundles_db("from-arg") == "from-arg"
    assert s.require_bundles_db("  ") == "from-env"


def test_empty_database_id_counts_as_missing(monkeypatch):
    monkeypatch.setenv("BOOKS_DB_ID", "")

    s = load_settings(_env_file=None, NOTION_TOKEN="tok")

    with pytest.raises(ConfigError, match="BOOKS_DB_ID"):
        s.require_books_db()


def test_storefront_credentials_name_missing_variables(monkeypatch):
    monkeypatch.setenv("HUMBLE_EMAIL", "me@example.com")

    s = load_settings(_env_file=None, NOTION_TOKEN="tok")

    with pytest.raises(ConfigError) as exc:
        s.storefront_credentials()
    assert "HUMBLE_PASSWORD" in str(exc.value)
    assert "HUMBLE_EMAIL" not in str(exc.value)


def test_storefront_credentials(monkeypatch):
    monkeypatch.setenv("HUMBLE_EMAIL", "me@example.com")
    monkeypatch.setenv("HUMBLE_PASSWORD", "pw")

    creds = load_settings(_env_file=None, NOTION_TOKEN="tok").storefront_credentials()

    assert (creds.email, creds.password) == ("me@example.com", "pw")
