from cutquote.server.settings.config import ROOT, Settings, get_settings, settings


def test_template_and_logo_live_under_project_root():
    s = Settings(template_path=ROOT / "templates" / "quote_template.html")
    assert s.template_path.is_file()
    assert (ROOT / "static" / "logo-placeholder.png").is_file()


def test_only_used_keys():
    assert "debug" not in Settings.model_fields


def test_get_settings_returns_module_instance():
    assert get_settings() is settings
