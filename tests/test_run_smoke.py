from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest

from market_e2e.config.settings import Settings
from market_e2e.flows import MarketSearchFlow, SearchOutcome

_SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "run_smoke.py"


def _load_script() -> ModuleType:
    spec = importlib.util.spec_from_file_location("run_smoke", _SCRIPT_PATH)
    assert spec and spec.loader
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def run_smoke(monkeypatch: pytest.MonkeyPatch, tmp_path) -> ModuleType:
    monkeypatch.chdir(tmp_path)
    return _load_script()


class _DummyPage:
    url = "http://localhost:3000/market"

    def __init__(self) -> None:
        self.screenshots: list[str] = []

    async def screenshot(self, path: str, full_page: bool = False) -> None:
        self.screenshots.append(path)
        Path(path).write_bytes(b"png")


class _DummyContext:
    def __init__(self, page: _DummyPage) -> None:
        self.page = page
        self.closed = False

    async def new_page(self) -> _DummyPage:
        return self.page

    async def close(self) -> None:
        self.closed = True


class _DummySession:
    def __init__(self, context: _DummyContext) -> None:
        self.context = context

    def __call__(self, _settings: Settings) -> "_DummySession":
        return self

    async def __aenter__(self) -> "_DummySession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def new_context(self) -> _DummyContext:
        return self.context


def _settings(tmp_path, **overrides: object) -> Settings:
    return Settings(
        _env_file=None,
        log_dir=tmp_path / "logs",
        artifacts_dir=tmp_path / "artifacts",
        **overrides,
    )


def _install_session(monkeypatch: pytest.MonkeyPatch, module: ModuleType) -> _DummyContext:
    context = _DummyContext(_DummyPage())
    monkeypatch.setattr(module, "BrowserSession", _DummySession(context))
    return context


def test_cli_flags_map_onto_settings(run_smoke: ModuleType) -> None:
    args = run_smoke.build_parser().parse_args(
        [
            "--base-url",
            "http://staging.test:8080/",
            "--browser",
            "firefox",
            "--headed",
            "--log-level",
            "DEBUG",
            "--query",
            "keyboard 12",
        ]
    )

    settings = run_smoke.settings_from_args(args)

    assert settings.market_url() == "http://staging.test:8080/market"
    assert settings.browser_name == "firefox"
    assert settings.headless is False
    assert settings.log_level == "DEBUG"
    assert args.query == "keyboard 12"


def test_cli_rejects_unknown_browser(run_smoke: ModuleType) -> None:
    with pytest.raises(SystemExit):
        run_smoke.build_parser().parse_args(["--browser", "netscape"])


@pytest.mark.parametrize("passed, exit_code", [(True, 0), (False, 1)])
def test_main_exit_status_follows_run_result(
    monkeypatch: pytest.MonkeyPatch, run_smoke: ModuleType, tmp_path, passed: bool, exit_code: int
) -> None:
    seen: dict[str, object] = {}

    async def fake_run(settings: Settings, query: str | None = None) -> bool:
        seen["settings"] = settings
        seen["query"] = query
        return passed

    monkeypatch.setattr(run_smoke, "run", fake_run)
    monkeypatch.setattr(run_smoke, "configure_logging", lambda _settings: tmp_path / "run.log")

    with pytest.raises(SystemExit) as excinfo:
        run_smoke.main(["--base-url", "http://localhost:4000", "--query", "mouse 9"])

    assert excinfo.value.code == exit_code
    assert seen["query"] == "mouse 9"
    assert seen["settings"].base_url == "http://localhost:4000"  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_run_returns_true_when_search_passes(
    monkeypatch: pytest.MonkeyPatch, run_smoke: ModuleType, tmp_path
) -> None:
    context = _install_session(monkeypatch, run_smoke)

    async def fake_flow_run(self, page, query=None):
        return SearchOutcome(url=page.url, query=query or self.settings.search_query)

    monkeypatch.setattr(MarketSearchFlow, "run", fake_flow_run)

    assert await run_smoke.run(_settings(tmp_path)) is True
    assert context.closed
    assert context.page.screenshots == []


@pytest.mark.asyncio
async def test_run_failure_writes_one_screenshot(
    monkeypatch: pytest.MonkeyPatch, run_smoke: ModuleType, tmp_path
) -> None:
    context = _install_session(monkeypatch, run_smoke)

    async def failing_flow_run(self, page, query=None):
        raise AssertionError("Locator expected to contain text 'mouse 345'")

    monkeypatch.setattr(MarketSearchFlow, "run", failing_flow_run)
    settings = _settings(tmp_path, screenshot_on_failure=True)

    assert await run_smoke.run(settings) is False
    assert context.closed
    assert len(context.page.screenshots) == 1
    assert len(list(settings.artifacts_dir.glob("market_search_*.png"))) == 1


@pytest.mark.asyncio
async def test_run_failure_skips_screenshot_when_disabled(
    monkeypatch: pytest.MonkeyPatch, run_smoke: ModuleType, tmp_path
) -> None:
    context = _install_session(monkeypatch, run_smoke)

    async def failing_flow_run(self, page, query=None):
        raise AssertionError("Locator expected to contain text 'mouse 345'")

    monkeypatch.setattr(MarketSearchFlow, "run", failing_flow_run)

    assert await run_smoke.run(_settings(tmp_path, screenshot_on_failure=False)) is False
    assert context.closed
    assert context.page.screenshots == []
