"""Tests for sentry_release.core.options module."""

from __future__ import annotations

from pathlib import Path

from sentry_release.core.options import (
    DerivedRelease,
    LiteralRelease,
    load_options,
    release_spec,
    resolve_options,
)
from sentry_release.core.result import Err, Ok


class TestResolveOptions:
    def test_defaults_when_no_options(self) -> None:
        assert resolve_options() == {"rewrite": True}
        assert resolve_options(None) == {"rewrite": True}
        assert resolve_options({}) == {"rewrite": True}

    def test_merges_over_defaults(self) -> None:
        assert resolve_options({"foo": 42}) == {"rewrite": True, "foo": 42}

    def test_caller_overrides_rewrite(self) -> None:
        assert resolve_options({"rewrite": False}) == {"rewrite": False}

    def test_wraps_scalar_include_and_ignore(self) -> None:
        options = resolve_options({"include": "foo", "ignore": "bar"})
        assert options == {"rewrite": True, "include": ["foo"], "ignore": ["bar"]}

    def test_keeps_sequences_as_given(self) -> None:
        options = resolve_options({"include": ["foo"], "ignore": ("bar", "baz")})
        assert options["include"] == ["foo"]
        assert options["ignore"] == ("bar", "baz")

    def test_wraps_path_scalar(self) -> None:
        options = resolve_options({"include": Path("dist")})
        assert options["include"] == [Path("dist")]

    def test_keeps_path_list(self) -> None:
        options = resolve_options({"include": [Path("dist"), "lib"]})
        assert options["include"] == [Path("dist"), "lib"]

    def test_set_becomes_sorted_list(self) -> None:
        options = resolve_options({"include": {"lib", "dist"}, "ignore": frozenset({"x"})})
        assert options["include"] == ["dist", "lib"]
        assert options["ignore"] == ["x"]
        assert resolve_options(options) == options

    def test_other_iterables_become_lists(self) -> None:
        options = resolve_options({"include": (p for p in ("dist", "lib"))})
        assert options["include"] == ["dist", "lib"]

    def test_absent_patterns_stay_absent(self) -> None:
        options = resolve_options({"release": "1.0"})
        assert "include" not in options
        assert "ignore" not in options

    def test_idempotent(self) -> None:
        once = resolve_options({"include": "src", "ignore": ["node_modules"], "url_prefix": "~/"})
        assert resolve_options(once) == once

    def test_does_not_mutate_input(self) -> None:
        raw: dict[str, object] = {"include": "src"}
        resolve_options(raw)
        assert raw == {"include": "src"}

    def test_passthrough_keys_preserved(self) -> None:
        marker = object()
        options = resolve_options({"config_file": "./some/file", "custom": marker})
        assert options["config_file"] == "./some/file"
        assert options["custom"] is marker


class TestReleaseSpec:
    def test_literal(self) -> None:
        spec = release_spec(42)
        assert spec == LiteralRelease(42)
        assert spec.resolve("someHash") == 42

    def test_missing_is_literal_none(self) -> None:
        assert release_spec(None).resolve("someHash") is None

    def test_derived_from_hash(self) -> None:
        spec = release_spec(lambda h: h + "Evaluated")
        assert isinstance(spec, DerivedRelease)
        assert spec.resolve("someHash") == "someHashEvaluated"

    def test_derived_runs_every_time(self) -> None:
        spec = release_spec(lambda h: f"web@{h}")
        assert spec.resolve("a") == "web@a"
        assert spec.resolve("b") == "web@b"


class TestLoadOptions:
    def test_loads_sentry_table(self, tmp_path: Path) -> None:
        path = tmp_path / "sentry.toml"
        path.write_text(
            '[sentry]\nrelease = "1.0"\ninclude = "dist"\nrewrite = false\n',
            encoding="utf-8",
        )
        result = load_options(path)
        assert isinstance(result, Ok)
        assert result.value == {"release": "1.0", "include": "dist", "rewrite": False}

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_options(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[sentry\n", encoding="utf-8")
        result = load_options(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_missing_table(self, tmp_path: Path) -> None:
        path = tmp_path / "other.toml"
        path.write_text('[build]\nout = "dist"\n', encoding="utf-8")
        result = load_options(path)
        assert isinstance(result, Err)
        assert "[sentry]" in result.error.message
