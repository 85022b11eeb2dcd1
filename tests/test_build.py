# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""End-to-end tests for the composer build pipeline against a real layer store."""

from __future__ import annotations

import os
from io import StringIO
from pathlib import Path

import pytest

from pycomposer.build import build, persist_result
from pycomposer.clock import Clock
from pycomposer.fingerprint import ChecksumCalculator
from pycomposer.layers import LayerStore
from pycomposer.logging import Emitter
from pycomposer.platform_reqs import extensions_ini_path
from pycomposer.process_utils import SubprocessExecutionError

L2_CONTENTS = '{"packages": [{"name": "monolog/monolog", "version": "3.6.0"}]}\n'


def _build(make_context, config, composer, emitter: Emitter, **context_kwargs):
    context = make_context(**context_kwargs)
    result = build(context, config=config, emitter=emitter, executable=composer, clock=Clock(lambda: 0.0))
    persist_result(context.layers, result)
    return result


def _record(layers_dir: Path) -> dict[str, object]:
    return LayerStore(layers_dir).get("composer-packages").metadata


def test_scenario_unchanged_lockfile_reinstalls_and_reuses(
    composer, emitter: Emitter, output: StringIO, workspace: Path, layers_dir: Path, make_context, make_config
) -> None:
    _build(make_context, make_config(), composer, emitter)
    first_metadata = _record(layers_dir)
    assert first_metadata["composer-lock-sha"] == ChecksumCalculator().sum(workspace / "composer.lock")
    assert composer.commands() == ["config", "install", "check-platform-reqs"]

    composer.executions.clear()
    _build(make_context, make_config(), composer, emitter)

    assert composer.commands() == ["install", "check-platform-reqs"]
    assert _record(layers_dir) == first_metadata
    assert (workspace / "vendor" / "autoload.php").read_text(encoding="utf-8") == "installed"
    assert "Reusing cached layer" in output.getvalue()


def test_scenario_changed_lockfile_supersedes_cache(
    composer, emitter: Emitter, workspace: Path, layers_dir: Path, make_context, make_config
) -> None:
    _build(make_context, make_config(), composer, emitter)
    (workspace / "composer.lock").write_text(L2_CONTENTS, encoding="utf-8")
    composer.executions.clear()
    composer.install_marker = "installed-l2"

    _build(make_context, make_config(), composer, emitter)

    assert composer.commands() == ["config", "install", "check-platform-reqs"]
    assert _record(layers_dir)["composer-lock-sha"] == ChecksumCalculator().sum(workspace / "composer.lock")
    cached = layers_dir / "composer-packages" / "vendor" / "autoload.php"
    assert cached.read_text(encoding="utf-8") == "installed-l2"


def test_scenario_reinstall_disabled_skips_install(
    composer, emitter: Emitter, output: StringIO, workspace: Path, layers_dir: Path, make_context, make_config
) -> None:
    _build(make_context, make_config(), composer, emitter)
    first_metadata = _record(layers_dir)
    composer.executions.clear()

    _build(make_context, make_config(BP_RUN_COMPOSER_INSTALL="false"), composer, emitter)

    assert composer.commands() == ["check-platform-reqs"]
    assert _record(layers_dir) == first_metadata
    assert (workspace / "vendor" / "autoload.php").read_text(encoding="utf-8") == "installed"
    assert "from cached files" not in output.getvalue()


def test_build_writes_php_ini_and_extensions(
    composer, emitter: Emitter, output: StringIO, workspace: Path, layers_dir: Path, make_context, make_config
) -> None:
    composer.platform_output = "ext-mbstring : missing\nphp : present\next-openssl : present\n"
    composer.platform_returncode = 2

    result = _build(make_context, make_config(PHP_EXTENSION_DIR="/layers/php/ext"), composer, emitter)

    php_ini = layers_dir / "composer-php-ini" / "composer-php.ini"
    assert php_ini.read_text(encoding="utf-8") == (
        '[PHP]\nextension_dir = "/layers/php/ext"\nextension = openssl.so'
    )
    assert all(execution.env["PHPRC"] == str(php_ini) for execution in composer.executions)
    assert result.extensions == ["openssl", "mbstring"]
    assert extensions_ini_path(workspace).read_text(encoding="utf-8") == (
        "extension = openssl.so\nextension = mbstring.so\n"
    )
    lines = output.getvalue().splitlines()
    assert lines[0] == "Composer Buildpack 1.2.3"
    assert "      Completed in 0ms" in lines


def test_global_bin_is_prefixed_to_path(
    composer, emitter: Emitter, layers_dir: Path, make_context, make_config
) -> None:
    _build(make_context, make_config(BP_COMPOSER_INSTALL_GLOBAL="squizlabs/php_codesniffer"), composer, emitter)

    global_bin = layers_dir / "composer-global" / "vendor" / "bin"
    assert composer.commands() == ["global", "config", "install", "check-platform-reqs"]
    for execution in composer.executions[1:]:
        assert execution.env["PATH"] == f"{global_bin}{os.pathsep}/usr/bin:/bin"


def test_custom_vendor_dir_is_synchronised(
    composer, emitter: Emitter, workspace: Path, layers_dir: Path, make_context, make_config
) -> None:
    _build(make_context, make_config(COMPOSER_VENDOR_DIR="lib/deps"), composer, emitter)

    assert (workspace / "lib" / "deps" / "autoload.php").is_file()
    assert (layers_dir / "composer-packages" / "vendor" / "autoload.php").is_file()


def test_failed_install_skips_platform_check_and_stamping(
    composer, emitter: Emitter, workspace: Path, layers_dir: Path, make_context, make_config
) -> None:
    composer.failures["install"] = 1

    with pytest.raises(SubprocessExecutionError):
        _build(make_context, make_config(), composer, emitter)

    assert "check-platform-reqs" not in composer.commands()
    assert not extensions_ini_path(workspace).exists()
    assert not (layers_dir / "composer-packages.json").exists()


def test_failed_rebuild_then_original_lockfile_builds_fresh(
    composer, emitter: Emitter, workspace: Path, layers_dir: Path, make_context, make_config
) -> None:
    _build(make_context, make_config(), composer, emitter)
    original_lock = (workspace / "composer.lock").read_text(encoding="utf-8")
    (workspace / "composer.lock").write_text(L2_CONTENTS, encoding="utf-8")
    composer.failures["install"] = 1

    with pytest.raises(SubprocessExecutionError):
        _build(make_context, make_config(), composer, emitter)

    assert not (layers_dir / "composer-packages.json").exists()

    (workspace / "composer.lock").write_text(original_lock, encoding="utf-8")
    composer.failures.clear()
    composer.executions.clear()
    _build(make_context, make_config(), composer, emitter)

    assert composer.commands() == ["config", "install", "check-platform-reqs"]
    assert (workspace / "vendor" / "autoload.php").is_file()
    assert (layers_dir / "composer-packages" / "vendor" / "autoload.php").is_file()
    assert _record(layers_dir)["composer-lock-sha"] == ChecksumCalculator().sum(workspace / "composer.lock")


def test_absolute_vendor_dir_stays_inside_working_dir(
    composer, emitter: Emitter, workspace: Path, layers_dir: Path, tmp_path: Path, make_context, make_config
) -> None:
    outside = tmp_path / "outside"

    _build(make_context, make_config(COMPOSER_VENDOR_DIR=str(outside)), composer, emitter)

    (install,) = composer.calls("install")
    vendor = Path(install.env["COMPOSER_VENDOR_DIR"])
    assert vendor.is_relative_to(workspace)
    assert (vendor / "autoload.php").is_file()
    assert not outside.exists()
    assert (layers_dir / "composer-packages" / "vendor" / "autoload.php").is_file()


def test_ambient_composer_variables_are_overridden(
    composer, emitter: Emitter, workspace: Path, layers_dir: Path, tmp_path: Path, make_context, make_config
) -> None:
    config = make_config(
        COMPOSER_HOME=str(tmp_path / "ambient-home"),
        COMPOSER_VENDOR_DIR="lib/deps",
        COMPOSER_NO_INTERACTION="0",
        BP_COMPOSER_INSTALL_GLOBAL="squizlabs/php_codesniffer",
    )

    _build(make_context, config, composer, emitter)

    assert composer.commands() == ["global", "config", "install", "check-platform-reqs"]
    assert all(execution.env["COMPOSER_NO_INTERACTION"] == "1" for execution in composer.executions)

    (global_call,) = composer.calls("global")
    assert global_call.env["COMPOSER_HOME"] == str(layers_dir / "composer-global")
    assert global_call.env["COMPOSER_VENDOR_DIR"] == "vendor"

    packages_home = str(layers_dir / "composer-packages" / ".composer")
    (config_call,) = composer.calls("config")
    assert config_call.env["COMPOSER_HOME"] == packages_home
    assert config_call.env["COMPOSER_VENDOR_DIR"] == "vendor"

    (install,) = composer.calls("install")
    assert install.env["COMPOSER_HOME"] == packages_home
    assert install.env["COMPOSER_VENDOR_DIR"] == str(workspace / "lib" / "deps")

    (platform,) = composer.calls("check-platform-reqs")
    assert platform.env["PHPRC"] == str(layers_dir / "composer-php-ini" / "composer-php.ini")
    assert not (tmp_path / "ambient-home").exists()
