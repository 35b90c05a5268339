"""Internationalization helpers for console output.

Provide translation strings and the ``translate`` helper used by the
orchestrator and CLI. The active language lives in the module-level
``LANG`` and is set once from the command line.

Typical usage::

    from devenv.setup.i18n import translate, set_language

"""

from __future__ import annotations

from devenv.config import LANG as _DEFAULT_LANG

LANG: str = _DEFAULT_LANG

TEXTS: dict[str, dict[str, str]] = {
    "en": {
        "welcome": "C/C++ development environment setup",
        "dry_run_notice": "Dry run: commands and downloads are only logged.",
        "probe_fast": "winget found: installing through the package manager.",
        "probe_manual": "winget not found: downloading installers directly.",
        "step_editor": "Visual Studio Code",
        "step_toolchain": "MSYS2",
        "step_compiler": "GCC / G++",
        "step_path": "PATH entry",
        "step_extension": "Code Runner extension",
        "step_settings": "Editor settings",
        "status_already": "already satisfied",
        "status_done": "done",
        "status_failed": "error",
        "status_skipped": "skipped",
        "settle_wait": "Waiting {seconds:.0f}s for MSYS2 to finish initialising...",
        "refresh_path": "Reloaded PATH for this session.",
        "summary_title": "Provisioning summary",
        "col_step": "Step",
        "col_status": "Status",
        "col_detail": "Detail",
        "completed_ok": "Setup complete. Open a new terminal to use gcc and g++.",
        "completed_failed": "Setup finished with errors. Re-run after fixing the steps marked as error.",
        "unsupported_platform": "This tool provisions Windows machines; use --dry-run elsewhere.",
        "config_error": "Configuration error",
    },
    "sv": {
        "welcome": "Installation av utvecklingsmiljö för C/C++",
        "dry_run_notice": "Testkörning: kommandon och nedladdningar loggas bara.",
        "probe_fast": "winget hittades: installerar via pakethanteraren.",
        "probe_manual": "winget saknas: laddar ner installationsprogrammen direkt.",
        "step_editor": "Visual Studio Code",
        "step_toolchain": "MSYS2",
        "step_compiler": "GCC / G++",
        "step_path": "PATH-post",
        "step_extension": "Code Runner-tillägg",
        "step_settings": "Editorinställningar",
        "status_already": "redan uppfyllt",
        "status_done": "klart",
        "status_failed": "fel",
        "status_skipped": "hoppades över",
        "settle_wait": "Väntar {seconds:.0f}s medan MSYS2 initieras...",
        "refresh_path": "PATH har lästs in på nytt för den här sessionen.",
        "summary_title": "Sammanfattning",
        "col_step": "Steg",
        "col_status": "Status",
        "col_detail": "Detalj",
        "completed_ok": "Klart. Öppna en ny terminal för att använda gcc och g++.",
        "completed_failed": "Installationen avslutades med fel. Kör igen när stegen markerade med fel har åtgärdats.",
        "unsupported_platform": "Verktyget installerar på Windows; använd --dry-run på andra system.",
        "config_error": "Konfigurationsfel",
    },
}


def translate(key: str) -> str:
    r"""Translate a UI key to the current language.

    Falls back to English, then to the key itself.

    Examples
    --------
    >>> translate("status_done")
    'done'
    >>> translate("UNKNOWN_KEY")
    'UNKNOWN_KEY'
    """
    table = TEXTS.get(LANG, TEXTS["en"])
    return table.get(key, TEXTS["en"].get(key, key))


_ = translate


def set_language(lang: str | None) -> str:
    """Set the module language, falling back to English for unknown codes."""
    global LANG
    LANG = lang if lang in TEXTS else "en"
    return LANG


__all__ = ["LANG", "TEXTS", "_", "set_language", "translate"]
