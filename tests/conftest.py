import typing

import pytest

import tickmeter.context
import tickmeter.event_io
import tickmeter.messages


RESOLUTION = 480

# One 4/4 measure at 480 ticks per quarter note.
MEASURE_4_4 = RESOLUTION * 4


def make_source (
	*tracks: typing.Iterable[typing.Tuple[int, tickmeter.messages.Message]],
	resolution: int = RESOLUTION,
	length: int = 0
) -> tickmeter.event_io.ListEventSource:

	"""Build an in-memory event source from (tick, message) pairs per track."""

	return tickmeter.event_io.ListEventSource.from_tuples(resolution, tracks, length=length)


def control_track (
	numerator: int = 4,
	denominator_power: int = 2,
	microseconds_per_quarter: int = 500000
) -> typing.List[typing.Tuple[int, tickmeter.messages.Message]]:

	"""A conductor track with one meter and one tempo at tick 0 (4/4, 120 bpm by default)."""

	return [
		(0, tickmeter.messages.MeterChange(numerator, denominator_power)),
		(0, tickmeter.messages.TempoChange(microseconds_per_quarter)),
	]


def note (start: int, end: int, pitch: int, velocity: int = 100) -> typing.List[typing.Tuple[int, tickmeter.messages.Message]]:

	"""A note-on/note-off pair."""

	return [
		(start, tickmeter.messages.NoteOn(pitch, velocity)),
		(end, tickmeter.messages.NoteOff(pitch)),
	]


@pytest.fixture
def context () -> tickmeter.context.RunContext:

	"""A fresh run context at the test resolution."""

	return tickmeter.context.RunContext(resolution=RESOLUTION)


@pytest.fixture
def simple_source () -> tickmeter.event_io.ListEventSource:

	"""
	One 4/4 measure at 120 bpm: quarter, quarter and a note starting on the first triplet.
	"""

	notes = [(0, tickmeter.messages.ProgramChange(0))]
	notes += note(0, 480, 60)
	notes += note(480, 960, 64)
	notes += note(640, MEASURE_4_4, 67)

	return make_source(control_track(), sorted(notes, key=lambda pair: pair[0]))
