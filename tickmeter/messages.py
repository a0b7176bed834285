"""
The message variant exchanged with event sources and sinks.

Each message kind is its own frozen dataclass and ``Message`` is the union of
them. Consumers dispatch with an ``isinstance`` chain over
the kinds in ``Message``; anything outside that closed set is unrecognized.
"""

import dataclasses
import typing


@dataclasses.dataclass (frozen=True)
class NoteOn:

	pitch: int
	velocity: int
	channel: int = 0


@dataclasses.dataclass (frozen=True)
class NoteOff:

	pitch: int
	channel: int = 0


@dataclasses.dataclass (frozen=True)
class ProgramChange:

	"""
	Selects a General MIDI instrument (0-127) for the track.
	"""

	program: int
	channel: int = 0


@dataclasses.dataclass (frozen=True)
class TempoChange:

	microseconds_per_quarter: int


@dataclasses.dataclass (frozen=True)
class MeterChange:

	"""
	A time signature as stored in MIDI: the denominator is a power of two exponent.
	"""

	numerator: int
	denominator_power: int


@dataclasses.dataclass (frozen=True)
class Text:

	data: bytes


@dataclasses.dataclass (frozen=True)
class Other:

	"""
	Any message kind the conversion has no use for (control change, SysEx, key signature...).
	"""

	kind: str
	payload: typing.Any = None


Message = typing.Union[NoteOn, NoteOff, ProgramChange, TempoChange, MeterChange, Text, Other]


# Sort rank for events sharing a tick: meters before tempi so a tempo lands in
# the right measure, and note-offs before note-ons so a repeated pitch is
# released before it is struck again.
_TICK_ORDER: typing.Dict[type, int] = {
	MeterChange: 0,
	TempoChange: 1,
	ProgramChange: 2,
	Text: 3,
	Other: 3,
	NoteOff: 4,
	NoteOn: 5,
}


@dataclasses.dataclass (frozen=True)
class TimedMessage:

	"""
	A message stamped with an absolute tick.
	"""

	tick: int
	message: Message

	def __post_init__ (self) -> None:

		if self.tick < 0:
			raise ValueError(f"Tick must not be negative, got {self.tick}")

	def sort_key (self) -> typing.Tuple[int, int]:

		"""Order by tick, then by message kind."""

		return self.tick, _TICK_ORDER.get(type(self.message), 3)
