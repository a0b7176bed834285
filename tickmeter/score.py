"""
A minimal symbolic score: parts of notes placed at ``Count`` positions, plus
the meter and tempo changes that give those positions a length.
"""

import dataclasses
import typing

import tickmeter.values


@dataclasses.dataclass (frozen=True, order=True)
class Note:

	"""
	A pitched note between two quantized positions.
	"""

	start: tickmeter.values.Count
	end: tickmeter.values.Count
	pitch: int

	def __post_init__ (self) -> None:

		if self.end < self.start:
			raise ValueError(f"Note ends ({self.end}) before it starts ({self.start})")

		if not 0 <= self.pitch <= 127:
			raise ValueError(f"Pitch must be a MIDI note number (0-127), got {self.pitch}")

	@property
	def duration (self) -> tickmeter.values.Count:

		return tickmeter.values.Count(self.end.value - self.start.value)


class Part:

	"""
	The notes played by one instrument (a General MIDI program number).
	"""

	def __init__ (self, instrument: int, notes: typing.Optional[typing.Iterable[Note]] = None) -> None:

		if not 0 <= instrument <= 127:
			raise ValueError(f"Instrument must be a MIDI program number (0-127), got {instrument}")

		self.instrument = instrument
		self.notes: typing.List[Note] = []

		for note in notes or ():
			self.add(note)

	def add (self, note: Note) -> None:

		self.notes.append(note)

	def __iter__ (self) -> typing.Iterator[Note]:

		return iter(sorted(self.notes))

	def __len__ (self) -> int:

		return len(self.notes)

	def __repr__ (self) -> str:

		return f"Part(instrument={self.instrument}, notes={len(self.notes)})"


class Score:

	"""
	Builder and reader for a whole piece.

	Meter changes are keyed by measure number (they always fall on a barline);
	tempo changes are keyed by ``Count`` and may fall anywhere.
	"""

	def __init__ (self) -> None:

		self._meters: typing.Dict[int, tickmeter.values.Meter] = {}
		self._tempi: typing.Dict[tickmeter.values.Count, tickmeter.values.Tempo] = {}
		self.parts: typing.List[Part] = []

	def add_meter_change (self, meter: tickmeter.values.Meter, measure: int) -> None:

		if measure < 0:
			raise ValueError(f"Measure must not be negative, got {measure}")

		self._meters[measure] = meter

	def add_tempo_change (self, tempo: tickmeter.values.Tempo, count: tickmeter.values.Count) -> None:

		if count.value < 0:
			raise ValueError(f"Tempo change position must not be negative, got {count}")

		self._tempi[count] = tempo

	def add_part (self, part: Part) -> None:

		self.parts.append(part)

	def meter_changes (self) -> typing.Iterator[typing.Tuple[int, tickmeter.values.Meter]]:

		"""Meter changes in measure order."""

		for measure in sorted(self._meters):
			yield measure, self._meters[measure]

	def tempo_changes (self) -> typing.Iterator[typing.Tuple[tickmeter.values.Count, tickmeter.values.Tempo]]:

		"""Tempo changes in position order."""

		for count in sorted(self._tempi):
			yield count, self._tempi[count]

	def meter_at (self, count: tickmeter.values.Count) -> typing.Optional[tickmeter.values.Meter]:

		"""The meter in force at ``count``, or None before the first meter change."""

		active = [measure for measure in self._meters if measure <= count.measure]

		return self._meters[max(active)] if active else None

	def tempo_at (self, count: tickmeter.values.Count) -> typing.Optional[tickmeter.values.Tempo]:

		"""The tempo in force at ``count``, or None before the first tempo change."""

		active = [position for position in self._tempi if position <= count]

		return self._tempi[max(active)] if active else None

	def __iter__ (self) -> typing.Iterator[Part]:

		return iter(self.parts)

	def __repr__ (self) -> str:

		return f"Score(meters={len(self._meters)}, tempi={len(self._tempi)}, parts={len(self.parts)})"
