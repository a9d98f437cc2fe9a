from __future__ import annotations

from ._gate import require_arch_checks_enabled
from ._utils import iter_python_files, matches_prefix, package_root, parse_imports


def _offenders(layer: str, forbidden: tuple[str, ...]) -> list[str]:
    root = package_root()
    offenders: list[str] = []
    for file_path in iter_python_files(root / layer):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if any(matches_prefix(item.module, prefix) for prefix in forbidden):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")
    return offenders


def test_core_is_self_contained() -> None:
    require_arch_checks_enabled()

    offenders = _offenders(
        "core",
        ("sentry_release.cli", "sentry_release.release", "sentry_release.plugin", "typer", "rich"),
    )
    assert not offenders, "core dependency violations:\n" + "\n".join(offenders)


def test_release_client_does_not_import_cli() -> None:
    require_arch_checks_enabled()

    offenders = _offenders("release", ("sentry_release.cli", "typer"))
    assert not offenders, "release -> cli dependency violations:\n" + "\n".join(offenders)
