"""Tests for bootstrap configuration loading."""
import pytest

from simplefs_bootstrap.bootstrap_config import BootstrapConfig, load_bootstrap_config


def test_defaults_match_dev_box():
    cfg = load_bootstrap_config()
    assert cfg.packages == ["libfuse-dev", "pkg-config", "gcc", "llvm", "libclang-dev", "clang", "curl"]
    assert cfg.user == "vagrant"
    assert cfg.installer_url == "https://sh.rustup.rs"
    assert cfg.installer_args == ["-y"]
    assert cfg.installer_sha256 is None
    assert cfg.tls_min_version == "1.2"
    assert cfg.dry_run is False


def test_override_merges_nested_keys(tmp_path):
    p = tmp_path / "box.yaml"
    p.write_text("toolchain:\n  user: builder\n  installer_sha256: ABC\n", encoding="utf-8")
    cfg = load_bootstrap_config(str(p))
    assert cfg.user == "builder"
    assert cfg.installer_sha256 == "abc"
    # untouched keys keep their defaults
    assert cfg.installer_url == "https://sh.rustup.rs"
    assert "clang" in cfg.packages


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_bootstrap_config(str(tmp_path / "nope.yaml"))


def test_non_yaml_suffix(tmp_path):
    p = tmp_path / "box.json"
    p.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        load_bootstrap_config(str(p))


def test_non_mapping(tmp_path):
    p = tmp_path / "box.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_bootstrap_config(str(p))


@pytest.mark.parametrize(
    "toolchain",
    [
        {"tls_min_version": "0.9"},
        {"installer_url": "http://sh.rustup.rs"},
    ],
)
def test_validate_rejects(toolchain):
    with pytest.raises(ValueError):
        BootstrapConfig(raw={"toolchain": toolchain}).validate()


def test_empty_user_means_no_privilege_drop():
    assert BootstrapConfig(raw={"toolchain": {"user": ""}}).user is None
