"""
CLI commands and the watch-mode ChangeHandler.
ChangeHandler is driven with mock events instead of real filesystem events.
"""
import asyncio
import json
import time
from unittest.mock import MagicMock, patch

import pytest

from figma_rn.cli import ChangeHandler, main


def make_event(src_path: str, is_directory: bool = False):
    ev = MagicMock()
    ev.is_directory = is_directory
    ev.src_path = src_path
    return ev


@pytest.fixture
def node_file(tmp_path, home_node):
    path = tmp_path / "home.json"
    path.write_text(json.dumps(home_node), encoding="utf-8")
    return path


@pytest.fixture
def no_config(tmp_path):
    return str(tmp_path / "figma-rn.config.json")


# ─── generate / preview / tokens ───────────────────────────────────────────

def test_generate_writes_component(tmp_path, node_file, no_config, capsys):
    out_dir = tmp_path / "screens"
    code = main(["--config", no_config, "generate", "--input", str(node_file),
                 "--output", str(out_dir), "--dump-ir"])
    assert code == 0
    component = (out_dir / "Home.tsx").read_text(encoding="utf-8")
    assert "export default function Home({" in component
    assert (out_dir / "Home.ir.json").exists()
    out = capsys.readouterr().out
    assert "✅" in out
    assert "unmapped colors" in out


def test_generate_uses_theme_and_name(tmp_path, node_file, no_config, theme_dict):
    theme = tmp_path / "theme.json"
    theme.write_text(json.dumps({"theme": theme_dict}), encoding="utf-8")
    out_dir = tmp_path / "screens"
    code = main(["--config", no_config, "generate", "--input", str(node_file),
                 "--theme", str(theme), "--output", str(out_dir), "--name", "Welcome"])
    assert code == 0
    component = (out_dir / "Welcome.tsx").read_text(encoding="utf-8")
    assert "backgroundColor: theme.colors.primary," in component


def test_generate_from_nodes_response(tmp_path, home_node, no_config):
    path = tmp_path / "response.json"
    path.write_text(json.dumps({"nodes": {"1:1": {"document": home_node}}}), encoding="utf-8")
    out_dir = tmp_path / "screens"
    assert main(["--config", no_config, "generate", "--input", str(path),
                 "--node-id", "1-1", "--output", str(out_dir)]) == 0
    assert (out_dir / "Home.tsx").exists()


def test_generate_reads_config(tmp_path, node_file):
    out_dir = tmp_path / "from-config"
    config = tmp_path / "figma-rn.config.json"
    config.write_text(json.dumps({
        "output": {"dir": str(out_dir)},
        "codeStyle": {"suppressTodos": True},
    }), encoding="utf-8")
    assert main(["--config", str(config), "generate", "--input", str(node_file)]) == 0
    assert "TODO" not in (out_dir / "Home.tsx").read_text(encoding="utf-8")


def test_invalid_config_fails(tmp_path, node_file, capsys):
    config = tmp_path / "figma-rn.config.json"
    config.write_text(json.dumps({"codeStyle": {"stylePattern": "emotion"}}), encoding="utf-8")
    assert main(["--config", str(config), "generate", "--input", str(node_file)]) == 1
    assert "codeStyle.stylePattern" in capsys.readouterr().out


def test_generate_without_token(no_config, monkeypatch, capsys):
    monkeypatch.delenv("FIGMA_TOKEN", raising=False)
    assert main(["--config", no_config, "generate", "--file-key", "KEY", "--node-id", "1:2"]) == 1
    assert "token" in capsys.readouterr().out.lower()


def test_generate_invalid_document(tmp_path, no_config, capsys):
    path = tmp_path / "empty.json"
    path.write_text("{}", encoding="utf-8")
    assert main(["--config", no_config, "generate", "--input", str(path),
                 "--output", str(tmp_path)]) == 1
    assert "Generate failed" in capsys.readouterr().out


def test_generate_filtered_root(tmp_path, home_node, no_config, capsys):
    home_node["visible"] = False
    path = tmp_path / "hidden.json"
    path.write_text(json.dumps(home_node), encoding="utf-8")
    assert main(["--config", no_config, "generate", "--input", str(path),
                 "--output", str(tmp_path / "out")]) == 0
    assert "Nothing to generate" in capsys.readouterr().out
    assert not (tmp_path / "out").exists()


def test_preview(node_file, no_config, capsys):
    assert main(["--config", no_config, "preview", "--input", str(node_file)]) == 0
    out = capsys.readouterr().out
    assert "├─ Home  [Container]" in out
    assert '├─ Title  [Text]  "Hello"  → title' in out
    assert "Total nodes: 4" in out


def test_tokens(node_file, no_config, capsys):
    assert main(["--config", no_config, "tokens", "--input", str(node_file)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["tokens"]["spacing"]["spacing_0"] == 28
    assert data["mappings"]["colors"]["color_0"] == "#1A1A1A"


def test_watch_requires_input(no_config, capsys):
    assert main(["--config", no_config, "watch"]) == 1
    assert "--input" in capsys.readouterr().out


# ─── ChangeHandler filter ──────────────────────────────────────────────────

class TestChangeHandlerFilter:
    def setup_method(self):
        self.loop = asyncio.new_event_loop()

        async def dummy_callback():
            pass

        self.handler = ChangeHandler(dummy_callback, self.loop, ["/work/node.json", "/work/theme.json"],
                                     debounce=0.0)

    def teardown_method(self):
        self.loop.close()

    def test_directory_event_ignored(self):
        with patch("asyncio.run_coroutine_threadsafe") as mock_run:
            self.handler.on_modified(make_event("/work/", is_directory=True))
            mock_run.assert_not_called()

    def test_unwatched_file_ignored(self):
        with patch("asyncio.run_coroutine_threadsafe") as mock_run:
            self.handler.on_modified(make_event("/work/other.json"))
            mock_run.assert_not_called()

    def test_watched_files_trigger_callback(self):
        for path in ("/work/node.json", "/work/theme.json"):
            with patch("asyncio.run_coroutine_threadsafe") as mock_run:
                self.handler.last_trigger = 0
                self.handler.on_modified(make_event(path))
                mock_run.assert_called_once()
                assert mock_run.call_args[0][1] is self.loop


# ─── ChangeHandler debounce ────────────────────────────────────────────────

class TestChangeHandlerDebounce:
    def setup_method(self):
        self.loop = asyncio.new_event_loop()

        async def dummy():
            pass

        self.handler = ChangeHandler(dummy, self.loop, ["/work/node.json"], debounce=0.5)

    def teardown_method(self):
        self.loop.close()

    def test_debounce_blocks_rapid_events(self):
        ev = make_event("/work/node.json")
        with patch("asyncio.run_coroutine_threadsafe") as mock_run:
            self.handler.on_modified(ev)
            self.handler.on_modified(ev)
            self.handler.on_modified(ev)
            assert mock_run.call_count == 1

    def test_debounce_allows_event_after_window(self):
        ev = make_event("/work/node.json")
        with patch("asyncio.run_coroutine_threadsafe") as mock_run:
            self.handler.on_modified(ev)
            self.handler.last_trigger = time.time() - 1.0
            self.handler.on_modified(ev)
            assert mock_run.call_count == 2
