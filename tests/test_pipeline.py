import fractions
import logging

import pytest

import conftest
import tickmeter
import tickmeter.config
import tickmeter.errors
import tickmeter.event_io
import tickmeter.messages
import tickmeter.pipeline
import tickmeter.score
import tickmeter.values


def _notes (score: tickmeter.score.Score) -> list:

	return [[(note.start.value, note.end.value, note.pitch) for note in part] for part in score]


def test_read_score (simple_source) -> None:

	"""A 4/4 piece at 120 bpm with quarter notes and a triplet."""

	result = tickmeter.pipeline.read_score(simple_source)

	assert result.ok
	assert result.warnings == []
	assert _notes(result.score) == [[
		(0, fractions.Fraction(1, 4), 60),
		(fractions.Fraction(1, 4), fractions.Fraction(1, 2), 64),
		(fractions.Fraction(1, 3), 1, 67),
	]]
	assert result.timeline.ticks_to_time(1920) == 1.0


def test_read_score_velocity_zero_off () -> None:

	"""A velocity-zero note-on closes the note like a note-off."""

	events = [
		(0, tickmeter.messages.ProgramChange(0)),
		(480, tickmeter.messages.NoteOn(64, 100)),
		(960, tickmeter.messages.NoteOn(64, 0)),
	]
	result = tickmeter.pipeline.read_score(conftest.make_source(conftest.control_track(), events))

	assert _notes(result.score) == [[(fractions.Fraction(1, 4), fractions.Fraction(1, 2), 64)]]


def test_read_score_meter_change () -> None:

	"""After a change to 3/8 a measure spans 720 ticks."""

	control = conftest.control_track() + [(9600, tickmeter.messages.MeterChange(3, 3))]
	notes = [(0, tickmeter.messages.ProgramChange(0))] + conftest.note(9600, 10320, 60) + conftest.note(10680, 16800, 62)

	result = tickmeter.pipeline.read_score(conftest.make_source(control, notes))

	assert result.ok
	assert list(result.score.meter_changes()) == [(0, tickmeter.values.Meter(4, 4)), (5, tickmeter.values.Meter(3, 8))]
	assert _notes(result.score) == [[(5, 6, 60), (fractions.Fraction(13, 2), 15, 62)]]


def test_read_score_unterminated_note () -> None:

	events = [(0, tickmeter.messages.ProgramChange(0)), (0, tickmeter.messages.NoteOn(60, 100))]

	result = tickmeter.pipeline.read_score(conftest.make_source(conftest.control_track(), events))

	assert not result.ok
	assert isinstance(result.errors[0], tickmeter.errors.UnterminatedNote)
	assert _notes(result.score) == [[]]


def test_read_score_quantization_policy () -> None:

	"""With the "nearest" policy an off-grid note snaps instead of failing."""

	events = [(0, tickmeter.messages.ProgramChange(0))] + conftest.note(7, 480, 60)
	source = conftest.make_source(conftest.control_track(), events)

	strict = tickmeter.pipeline.read_score(source)
	lenient = tickmeter.pipeline.read_score(source, tickmeter.config.Settings(on_quantize_failure="nearest"))

	assert isinstance(strict.errors[0], tickmeter.errors.QuantizationFailure)
	assert lenient.ok
	assert _notes(lenient.score) == [[(0, fractions.Fraction(1, 4), 60)]]


def test_runs_do_not_share_state (simple_source) -> None:

	"""Warnings and errors belong to the run that produced them."""

	broken = conftest.make_source([(0, tickmeter.messages.MeterChange(4, 0))])

	first = tickmeter.pipeline.read_score(broken)
	second = tickmeter.pipeline.read_score(simple_source)

	assert first.warnings
	assert second.warnings == []


def test_read_score_logs_stages (caplog: pytest.LogCaptureFixture, simple_source) -> None:

	with caplog.at_level(logging.INFO, logger="tickmeter.pipeline"):
		tickmeter.pipeline.read_score(simple_source)

	assert "Quantizing" in caplog.text
	assert "Read 1 parts" in caplog.text


def test_write_then_read (simple_source) -> None:

	"""A score written to events reads back as the same score."""

	original = tickmeter.pipeline.read_score(simple_source)
	sink = tickmeter.event_io.ListEventSink()

	export = tickmeter.pipeline.write_score(original.score, sink)
	reread = tickmeter.pipeline.read_score(sink.to_source())

	assert export.ok
	assert export.resolution == 480
	assert [event.tick for event in sink.tracks[1]] == [0, 0, 480, 480, 640, 960, 1920]
	assert _notes(reread.score) == _notes(original.score)
	assert list(reread.score.meter_changes()) == list(original.score.meter_changes())
	assert list(reread.score.tempo_changes()) == list(original.score.tempo_changes())


def test_package_exports () -> None:

	assert tickmeter.Count is tickmeter.values.Count
	assert tickmeter.read_score is tickmeter.pipeline.read_score


def test_every_meter_survives_a_round_trip () -> None:

	"""Meters written by the exporter are read back unchanged, measure for measure."""

	score = tickmeter.score.Score()
	score.add_tempo_change(tickmeter.values.Tempo(120), tickmeter.values.Count(0))

	meters = [tickmeter.values.Meter(2, 2), tickmeter.values.Meter(3, 8), tickmeter.values.Meter(7, 16), tickmeter.values.Meter(4, 4)]

	for measure, meter in enumerate(meters):
		score.add_meter_change(meter, measure)

	sink = tickmeter.event_io.ListEventSink()
	tickmeter.pipeline.write_score(score, sink)
	reread = tickmeter.pipeline.read_score(sink.to_source())

	assert reread.warnings == []
	assert list(reread.score.meter_changes()) == list(enumerate(meters))


def test_meter_over_one_cannot_be_scored () -> None:

	"""A whole-note denominator is refused before it can reach the exporter."""

	with pytest.raises(tickmeter.errors.InvalidMeter):
		tickmeter.values.Meter(2, 1)


def test_late_first_meter_moves_to_start () -> None:

	"""A piece whose only meter arrives after tick 0 reads as starting in that meter, without warnings."""

	control = [(0, tickmeter.messages.TempoChange(500000)), (960, tickmeter.messages.MeterChange(3, 2))]

	result = tickmeter.pipeline.read_score(conftest.make_source(control, length=2880))

	assert result.warnings == []
	assert list(result.score.meter_changes()) == [(0, tickmeter.values.Meter(3, 4))]
