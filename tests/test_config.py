import logging
import pathlib

import pytest

import tickmeter.config
import tickmeter.context
import tickmeter.errors
import tickmeter.values


def test_defaults () -> None:

	settings = tickmeter.config.Settings()

	assert settings.tolerance == 0.001
	assert settings.max_denominator == 59
	assert settings.on_quantize_failure == "raise"
	assert settings.default_meter == tickmeter.values.Meter(4, 4)
	assert settings.default_tempo == tickmeter.values.Tempo(120)
	assert settings.default_instrument is None
	assert settings.export_resolution == 480


def test_missing_file_uses_defaults (caplog: pytest.LogCaptureFixture, tmp_path: pathlib.Path) -> None:

	with caplog.at_level(logging.WARNING, logger="tickmeter.config"):
		settings = tickmeter.config.load_settings(str(tmp_path / "absent.yaml"))

	assert settings == tickmeter.config.Settings()
	assert "not found" in caplog.text


def test_load_yaml (tmp_path: pathlib.Path) -> None:

	path = tmp_path / "tickmeter.yaml"
	path.write_text("max_denominator: 16\non_quantize_failure: nearest\ndefault_meter: 3/4\ndefault_instrument: 24\n")

	settings = tickmeter.config.load_settings(str(path))

	assert settings.max_denominator == 16
	assert settings.on_quantize_failure == "nearest"
	assert settings.default_meter == tickmeter.values.Meter(3, 4)
	assert settings.default_instrument == 24


def test_empty_yaml_uses_defaults (tmp_path: pathlib.Path) -> None:

	path = tmp_path / "tickmeter.yaml"
	path.write_text("")

	assert tickmeter.config.load_settings(str(path)) == tickmeter.config.Settings()


def test_yaml_must_be_a_mapping (tmp_path: pathlib.Path) -> None:

	path = tmp_path / "tickmeter.yaml"
	path.write_text("- 1\n- 2\n")

	with pytest.raises(ValueError, match="mapping"):
		tickmeter.config.load_settings(str(path))


def test_meter_as_list () -> None:

	settings = tickmeter.config.settings_from_dict({"default_meter": [6, 8]})

	assert settings.default_meter == tickmeter.values.Meter(6, 8)


def test_unknown_key_rejected () -> None:

	with pytest.raises(ValueError, match="Unknown settings: tolerence"):
		tickmeter.config.settings_from_dict({"tolerence": 0.01})


def test_invalid_meter_rejected () -> None:

	with pytest.raises(tickmeter.errors.InvalidMeter):
		tickmeter.config.settings_from_dict({"default_meter": "3/5"})


@pytest.mark.parametrize("kwargs", [
	{"tolerance": 0},
	{"max_denominator": 0},
	{"on_quantize_failure": "skip"},
	{"default_bpm": 0},
	{"default_instrument": 128},
	{"export_resolution": -1},
	{"export_velocity": 0},
])
def test_invalid_settings (kwargs: dict) -> None:

	with pytest.raises(ValueError):
		tickmeter.config.Settings(**kwargs)


def test_context_records_warnings_and_errors (caplog: pytest.LogCaptureFixture) -> None:

	"""Warnings and errors are kept on the context and logged."""

	context = tickmeter.context.RunContext()
	error = tickmeter.errors.UnterminatedNote(1, 60, 0)

	with caplog.at_level(logging.WARNING, logger="tickmeter.context"):
		context.warn("substituted a default")
		context.fail(error)

	assert context.warnings == ["substituted a default"]
	assert context.errors == [error]
	assert "substituted a default" in caplog.text
	assert "no matching note-off" in caplog.text
