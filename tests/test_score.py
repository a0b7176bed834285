import pathlib
import sys

import pytest

import tickmeter.__main__
import tickmeter.pipeline
import tickmeter.score
import tickmeter.values


def test_note_validation () -> None:

	start = tickmeter.values.Count(1)

	with pytest.raises(ValueError):
		tickmeter.score.Note(start, tickmeter.values.Count(0), 60)

	with pytest.raises(ValueError):
		tickmeter.score.Note(start, start, 128)


def test_note_duration () -> None:

	note = tickmeter.score.Note(tickmeter.values.Count.of(0, 1, 3), tickmeter.values.Count(1), 60)

	assert note.duration == tickmeter.values.Count.of(0, 2, 3)


def test_part_iterates_in_order () -> None:

	late = tickmeter.score.Note(tickmeter.values.Count(1), tickmeter.values.Count(2), 60)
	early = tickmeter.score.Note(tickmeter.values.Count(0), tickmeter.values.Count(1), 64)

	part = tickmeter.score.Part(0, [late, early])

	assert list(part) == [early, late]
	assert len(part) == 2


def test_part_rejects_bad_instrument () -> None:

	with pytest.raises(ValueError):
		tickmeter.score.Part(128)


def test_meter_and_tempo_lookup () -> None:

	score = tickmeter.score.Score()
	score.add_meter_change(tickmeter.values.Meter(3, 4), 4)
	score.add_meter_change(tickmeter.values.Meter(4, 4), 0)
	score.add_tempo_change(tickmeter.values.Tempo(90), tickmeter.values.Count.of(2, 1, 2))

	assert [measure for measure, _ in score.meter_changes()] == [0, 4]
	assert score.meter_at(tickmeter.values.Count.of(3, 1, 2)) == tickmeter.values.Meter(4, 4)
	assert score.meter_at(tickmeter.values.Count(4)) == tickmeter.values.Meter(3, 4)
	assert score.tempo_at(tickmeter.values.Count(2)) is None
	assert score.tempo_at(tickmeter.values.Count(3)) == tickmeter.values.Tempo(90)


def test_score_rejects_negative_positions () -> None:

	score = tickmeter.score.Score()

	with pytest.raises(ValueError):
		score.add_meter_change(tickmeter.values.Meter(4, 4), -1)

	with pytest.raises(ValueError):
		score.add_tempo_change(tickmeter.values.Tempo(120), tickmeter.values.Count(-1))


def test_cli_prints_parts (capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:

	"""The command line reads a file, prints its parts and writes a quantized copy."""

	score = tickmeter.score.Score()
	score.add_meter_change(tickmeter.values.Meter(4, 4), 0)
	score.add_tempo_change(tickmeter.values.Tempo(120), tickmeter.values.Count(0))
	score.add_part(tickmeter.score.Part(5, [tickmeter.score.Note(tickmeter.values.Count(0), tickmeter.values.Count.of(0, 1, 3), 60)]))

	source = tmp_path / "in.mid"
	output = tmp_path / "out.mid"
	tickmeter.pipeline.write_midi_file(score, str(source))

	monkeypatch.setattr(sys, "argv", ["tickmeter", str(source), "--config", str(tmp_path / "none.yaml"), "--write", str(output)])
	tickmeter.__main__.main()

	printed = capsys.readouterr().out

	assert "measure 0: 4/4" in printed
	assert "Part 0 (program 5, 1 notes)" in printed
	assert "0 -> 0+1/3  pitch 60" in printed
	assert output.exists()
