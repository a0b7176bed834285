"""
The boundary between the conversion core and whatever reads or writes bytes.

An ``EventSource`` enumerates tick-stamped messages per track; an
``EventSink`` accepts them. ``tickmeter.midi_io`` implements both on top of
``mido``; the in-memory versions here are for building events by hand.
"""

import dataclasses
import typing

import tickmeter.messages


TrackEvents = typing.Sequence[tickmeter.messages.TimedMessage]


@typing.runtime_checkable
class EventSource (typing.Protocol):

	"""
	Protocol for anything that can enumerate a piece's events.
	"""

	resolution: int
	length: int


	def tracks (self) -> typing.Sequence[typing.Iterable[tickmeter.messages.TimedMessage]]:

		"""
		Per-track events in non-decreasing tick order. The track id is the index.
		"""

		...


@typing.runtime_checkable
class EventSink (typing.Protocol):

	"""
	Protocol for anything that can take a piece's events for serialization.
	"""

	def accept (self, resolution: int, tracks: typing.Sequence[TrackEvents]) -> None:

		"""
		Receive every track's events, sorted by tick, at ``resolution`` ticks per quarter note.
		"""

		...


@dataclasses.dataclass
class ListEventSource:

	"""
	An event source over events already held in memory.

	When ``length`` is left at zero it is taken from the last event.
	"""

	resolution: int
	track_events: typing.List[typing.List[tickmeter.messages.TimedMessage]] = dataclasses.field(default_factory=list)
	length: int = 0

	def __post_init__ (self) -> None:

		if self.resolution <= 0:
			raise ValueError("Resolution must be positive")

		last_tick = max((event.tick for track in self.track_events for event in track), default=0)
		self.length = max(self.length, last_tick)

	@classmethod
	def from_tuples (
		cls,
		resolution: int,
		tracks: typing.Iterable[typing.Iterable[typing.Tuple[int, tickmeter.messages.Message]]],
		length: int = 0
	) -> "ListEventSource":

		"""
		Build a source from plain ``(tick, message)`` pairs per track.
		"""

		track_events = [
			[tickmeter.messages.TimedMessage(tick, message) for tick, message in track]
			for track in tracks
		]

		return cls(resolution=resolution, track_events=track_events, length=length)

	def tracks (self) -> typing.Sequence[typing.Iterable[tickmeter.messages.TimedMessage]]:

		return self.track_events


class ListEventSink:

	"""
	An event sink that keeps what it is given.
	"""

	def __init__ (self) -> None:

		self.resolution: int = 0
		self.tracks: typing.List[typing.List[tickmeter.messages.TimedMessage]] = []

	def accept (self, resolution: int, tracks: typing.Sequence[TrackEvents]) -> None:

		self.resolution = resolution
		self.tracks = [list(track) for track in tracks]

	def to_source (self) -> ListEventSource:

		"""
		Turn the accepted events back into a source, for reading what was written.
		"""

		return ListEventSource(resolution=self.resolution, track_events=[list(track) for track in self.tracks])
