import dataclasses
import logging
import typing

import tickmeter.context
import tickmeter.errors
import tickmeter.event_io
import tickmeter.indexed_timeline
import tickmeter.messages
import tickmeter.values


logger = logging.getLogger(__name__)

P = typing.TypeVar("P")


@dataclasses.dataclass
class TrackEvents (typing.Generic[P]):

	"""
	One track's events, indexed by position.

	The position type changes as the track moves through the pipeline: ticks
	after classification, continuous time after the timeline, ``Count`` after
	quantization.
	"""

	track: int
	note_ons: tickmeter.indexed_timeline.IndexedTimeline[P, typing.Set[int]] = dataclasses.field(default_factory=tickmeter.indexed_timeline.IndexedTimeline)
	note_offs: typing.Dict[int, tickmeter.indexed_timeline.IndexedTimeline[P, int]] = dataclasses.field(default_factory=dict)
	instruments: tickmeter.indexed_timeline.IndexedTimeline[P, int] = dataclasses.field(default_factory=tickmeter.indexed_timeline.IndexedTimeline)

	def add_note_on (self, position: P, pitch: int) -> None:

		self.note_ons.setdefault(position, set).add(pitch)

	def add_note_off (self, position: P, pitch: int) -> None:

		offs = self.note_offs.setdefault(pitch, tickmeter.indexed_timeline.IndexedTimeline())
		offs[position] = offs.get(position, 0) + 1

	@property
	def has_notes (self) -> bool:

		return bool(self.note_ons)


@dataclasses.dataclass
class ClassifiedEvents (typing.Generic[P]):

	"""
	Every event of a piece, bucketed by kind and indexed by position.
	"""

	tracks: typing.List[TrackEvents[P]] = dataclasses.field(default_factory=list)
	meters: tickmeter.indexed_timeline.IndexedTimeline[P, tickmeter.values.Meter] = dataclasses.field(default_factory=tickmeter.indexed_timeline.IndexedTimeline)
	tempi: tickmeter.indexed_timeline.IndexedTimeline[P, tickmeter.values.Tempo] = dataclasses.field(default_factory=tickmeter.indexed_timeline.IndexedTimeline)
	final_tick: int = 0


def classify (source: tickmeter.event_io.EventSource, context: tickmeter.context.RunContext) -> ClassifiedEvents[int]:

	"""
	Bucket a source's events per track into tick-indexed tables.

	Note-ons with velocity 0 count as note-offs. Malformed meters are replaced
	by the default meter and malformed tempi are dropped, each with a warning
	on ``context``. Message kinds the conversion does not use are logged and
	skipped; anything outside the message variant is skipped with a warning.
	"""

	if source.resolution <= 0:
		raise ValueError(f"Resolution must be positive, got {source.resolution}")

	context.resolution = source.resolution

	classified: ClassifiedEvents[int] = ClassifiedEvents(final_tick=max(0, source.length))

	for track_id, events in enumerate(source.tracks()):

		track: TrackEvents[int] = TrackEvents(track=track_id)

		for event in events:
			_classify_message(event.tick, event.message, track, classified, context)
			classified.final_tick = max(classified.final_tick, event.tick)

		classified.tracks.append(track)

	logger.debug(f"Classified {len(classified.tracks)} tracks, {len(classified.meters)} meter changes, {len(classified.tempi)} tempo changes")

	return classified


def _classify_message (
	tick: int,
	message: tickmeter.messages.Message,
	track: TrackEvents[int],
	classified: ClassifiedEvents[int],
	context: tickmeter.context.RunContext
) -> None:

	if isinstance(message, tickmeter.messages.NoteOn):

		if message.velocity == 0:
			track.add_note_off(tick, message.pitch)
		else:
			track.add_note_on(tick, message.pitch)

	elif isinstance(message, tickmeter.messages.NoteOff):
		track.add_note_off(tick, message.pitch)

	elif isinstance(message, tickmeter.messages.ProgramChange):
		track.instruments[tick] = message.program

	elif isinstance(message, tickmeter.messages.TempoChange):

		try:
			classified.tempi[tick] = tickmeter.values.Tempo.from_microseconds(message.microseconds_per_quarter)
		except ValueError as e:
			context.warn(f"Track {track.track}: ignoring tempo change at tick {tick}: {e}", logger)

	elif isinstance(message, tickmeter.messages.MeterChange):

		try:
			meter = tickmeter.values.Meter.from_midi(message.numerator, message.denominator_power)
		except tickmeter.errors.InvalidMeter as e:
			meter = context.settings.default_meter
			context.warn(f"Track {track.track}: {e} at tick {tick}, reverting to {meter}", logger)

		classified.meters[tick] = meter

	elif isinstance(message, tickmeter.messages.Text):
		text = message.data.decode("utf-8", errors="replace").replace("\n", "").replace("\r", "")
		logger.debug(f"Track {track.track}: text at tick {tick}: {text!r}")

	elif isinstance(message, tickmeter.messages.Other):
		logger.debug(f"Track {track.track}: skipping {message.kind} at tick {tick}")

	else:
		context.warn(str(tickmeter.errors.UnrecognizedMessage(track.track, tick, message)), logger)
