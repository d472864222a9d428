import pytest

from mycontacts.config.manager import ConfigManager


@pytest.mark.asyncio
async def test_defaults_without_file(tmp_path, monkeypatch):
    for var in ("MYCONTACTS_DEBUG", "MYCONTACTS_MENU_PATH", "MYCONTACTS_STORE_PATH", "MYCONTACTS_AUTHORIZATION"):
        monkeypatch.delenv(var, raising=False)
    cfg = ConfigManager(str(tmp_path / "config.yaml"))
    await cfg.load()

    assert cfg.is_loaded
    assert cfg.get("demo.search_name") == "Appleseed"
    assert cfg.get("ui.edit_unknown_row_height") == 81.0
    assert cfg.get("menu.path") is None
    assert cfg.get("menu.path", "fallback") == "fallback"
    assert cfg.get("no.such.key", 3) == 3
    # Loading alone never creates the file.
    assert not (tmp_path / "config.yaml").exists()


@pytest.mark.asyncio
async def test_yaml_file_merges_over_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("MYCONTACTS_AUTHORIZATION", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "contacts:\n  authorization: authorized\nui:\n  row_height: 50\n",
        encoding="utf-8",
    )
    cfg = ConfigManager(str(path))
    await cfg.load()

    assert cfg.get("contacts.authorization") == "authorized"
    assert cfg.get("contacts.grant_on_request") is True
    assert cfg.get("ui.row_height") == 50
    assert cfg.get("ui.edit_unknown_row_height") == 81.0


@pytest.mark.asyncio
async def test_env_overrides_and_watchers(tmp_path, monkeypatch):
    monkeypatch.setenv("MYCONTACTS_AUTHORIZATION", "Denied")
    monkeypatch.setenv("MYCONTACTS_STORE_PATH", str(tmp_path / "people.md"))
    cfg = ConfigManager(str(tmp_path / "config.json"))
    await cfg.load()

    assert cfg.get("contacts.authorization") == "denied"
    assert cfg.get("contacts.store_path") == str(tmp_path / "people.md")

    seen = []
    cfg.watch(lambda key, value: seen.append((key, value)))
    cfg.set("contacts.authorization", "authorized")
    assert seen == [("contacts.authorization", "authorized")]

    await cfg.save()
    saved = (tmp_path / "config.json").read_text(encoding="utf-8")
    assert '"authorized"' in saved
    assert "people.md" not in saved


@pytest.mark.asyncio
async def test_broken_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    cfg = ConfigManager(str(path))
    await cfg.load()

    assert cfg.get("app.name") == "MyContacts"


@pytest.mark.asyncio
async def test_env_overrides_are_not_saved(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("contacts:\n  authorization: authorized\n", encoding="utf-8")

    monkeypatch.setenv("MYCONTACTS_AUTHORIZATION", "denied")
    monkeypatch.setenv("MYCONTACTS_DEBUG", "true")
    cfg = ConfigManager(str(path))
    await cfg.load()
    assert cfg.get("contacts.authorization") == "denied"
    assert cfg.all["app"]["debug"] is True
    await cfg.save()

    monkeypatch.delenv("MYCONTACTS_AUTHORIZATION")
    monkeypatch.delenv("MYCONTACTS_DEBUG")
    reloaded = ConfigManager(str(path))
    await reloaded.load()

    assert reloaded.get("contacts.authorization") == "authorized"
    assert reloaded.get("app.debug") is False
