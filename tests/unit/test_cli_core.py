import pytest

from ipintel.cli import EXIT_HARD_FAIL, main, parse_args


def test_parse_args_defaults():
    args = parse_args(["lookup", "8.8.8.8"])
    assert args.command == "lookup"
    assert args.targets == ["8.8.8.8"]
    assert args.overlay_config_dir is None
    assert args.log_level is None
    assert args.output is None


def test_parse_args_accepts_batch_targets_and_overlay():
    args = parse_args(["batch", "1.1.1.1", "8.8.8.8", "--overlay-config-dir", "config/live"])
    assert args.targets == ["1.1.1.1", "8.8.8.8"]
    assert args.overlay_config_dir == "config/live"


def test_parse_args_rejects_unknown_operation():
    with pytest.raises(SystemExit):
        parse_args(["geocode", "8.8.8.8"])


def test_main_missing_config_is_hard_failure(tmp_path, capsys):
    code = main(["overview", "--config-dir", str(tmp_path / "missing")])

    assert code == EXIT_HARD_FAIL
    assert capsys.readouterr().err.startswith("CONFIG_ERROR:")
