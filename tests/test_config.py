from pathlib import Path

import pytest

from parsebench.config import Settings, SuiteConfig, load_suite
from parsebench.config.settings import DEFAULT_DOCUMENTS, DEFAULT_ITERATIONS


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("PARSEBENCH_SAMPLES_DIR", "PARSEBENCH_WASM_PATH", "PARSEBENCH_ITERATIONS", "PARSEBENCH_BACKENDS"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings.from_env()

        assert settings.samples_dir == Path("samples")
        assert settings.iterations == DEFAULT_ITERATIONS
        assert settings.backends == []

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PARSEBENCH_SAMPLES_DIR", "/data/json")
        monkeypatch.setenv("PARSEBENCH_WASM_PATH", "/opt/parser.wasm")
        monkeypatch.setenv("PARSEBENCH_ITERATIONS", "250")
        monkeypatch.setenv("PARSEBENCH_BACKENDS", "json, orjson,,wasm-serde")

        settings = Settings.from_env()

        assert settings.samples_dir == Path("/data/json")
        assert settings.wasm_path == Path("/opt/parser.wasm")
        assert settings.iterations == 250
        assert settings.backends == ["json", "orjson", "wasm-serde"]

    def test_invalid_iterations(self, monkeypatch):
        monkeypatch.setenv("PARSEBENCH_ITERATIONS", "many")
        with pytest.raises(ValueError):
            Settings.from_env()


class TestSuiteConfig:
    def test_from_settings(self):
        suite = SuiteConfig.from_settings(Settings(samples_dir=Path("s"), iterations=10))
        assert suite.documents == [Path("s") / name for name in DEFAULT_DOCUMENTS]
        assert suite.modes == [None, 10]

    @pytest.mark.parametrize("modes", [[0], [-1], [None, True], ["5"]])
    def test_rejects_bad_modes(self, modes):
        with pytest.raises(ValueError):
            SuiteConfig(modes=modes)

    def test_rejects_unknown_style(self):
        with pytest.raises(ValueError):
            SuiteConfig(style="csv")

    def test_rejects_unknown_headline(self):
        with pytest.raises(ValueError):
            SuiteConfig(headline="median")


class TestLoadSuite:
    def test_full_file(self, tmp_path):
        config = tmp_path / "suites" / "suite.yaml"
        config.parent.mkdir()
        config.write_text(
            "documents: [../samples/sample.json, /abs/other.json]\n"
            "iterations: 500\n"
            "modes: [single, iterated, 50]\n"
            "backends: [json, orjson]\n"
            "wasm_path: ../wasm/parser.wasm\n"
            "style: pipe\n"
            "headline: best\n"
        )

        suite = load_suite(config, Settings())

        assert suite.documents == [config.parent / "../samples/sample.json", Path("/abs/other.json")]
        assert suite.modes == [None, 500, 50]
        assert suite.backends == ["json", "orjson"]
        assert suite.wasm_path == config.parent / "../wasm/parser.wasm"
        assert suite.style == "pipe"
        assert suite.headline == "best"

    def test_empty_file_uses_settings(self, tmp_path):
        config = tmp_path / "suite.yaml"
        config.write_text("")
        settings = Settings(samples_dir=tmp_path / "samples", iterations=7, backends=["json"])

        suite = load_suite(config, settings)

        assert suite.documents == [tmp_path / "samples" / name for name in DEFAULT_DOCUMENTS]
        assert suite.modes == [None, 7]
        assert suite.backends == ["json"]
        assert suite.wasm_path == settings.wasm_path

    def test_backends_as_string(self, tmp_path):
        config = tmp_path / "suite.yaml"
        config.write_text("backends: json, ujson\n")
        assert load_suite(config, Settings()).backends == ["json", "ujson"]

    @pytest.mark.parametrize("content", [
        "modes: [sometimes]\n",
        "iterations: lots\n",
        "- just\n- a list\n",
        "modes: [single\n",
    ])
    def test_invalid_files(self, tmp_path, content):
        config = tmp_path / "suite.yaml"
        config.write_text(content)
        with pytest.raises(ValueError):
            load_suite(config, Settings())

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_suite(tmp_path / "absent.yaml", Settings())
