"""
Turns classified, tick-indexed events into a score.

Events move through three position types: ticks, continuous time and
``Count``. ``to_time()`` and ``to_counts()`` are the two stage boundaries;
``assemble()`` pairs notes and fills the score.
"""

import logging
import typing

import tickmeter.classifier
import tickmeter.context
import tickmeter.errors
import tickmeter.quantizer
import tickmeter.score
import tickmeter.tick_timeline
import tickmeter.values


logger = logging.getLogger(__name__)

P = typing.TypeVar("P")
Q = typing.TypeVar("Q")


def _union (earlier: typing.Set[int], later: typing.Set[int]) -> typing.Set[int]:

	return earlier | later


def _total (earlier: int, later: int) -> int:

	return earlier + later


def rekey_events (
	events: tickmeter.classifier.ClassifiedEvents[P],
	convert: typing.Callable[[P], typing.Optional[Q]]
) -> tickmeter.classifier.ClassifiedEvents[Q]:

	"""
	Move every table of ``events`` to a new position type.

	Positions that land on the same new position are merged: note-on pitch
	sets are joined, note-off counts are added, and for instruments, meters
	and tempi the later value wins. Positions that convert to None are dropped.
	"""

	result: tickmeter.classifier.ClassifiedEvents[Q] = tickmeter.classifier.ClassifiedEvents(
		meters = events.meters.rekey(convert),
		tempi = events.tempi.rekey(convert),
		final_tick = events.final_tick
	)

	for track in events.tracks:

		result.tracks.append(tickmeter.classifier.TrackEvents(
			track = track.track,
			note_ons = track.note_ons.rekey(convert, merge=_union),
			note_offs = {pitch: offs.rekey(convert, merge=_total) for pitch, offs in track.note_offs.items()},
			instruments = track.instruments.rekey(convert)
		))

	return result


def to_time (
	events: tickmeter.classifier.ClassifiedEvents[int],
	timeline: tickmeter.tick_timeline.TickTimeline
) -> tickmeter.classifier.ClassifiedEvents[float]:

	"""
	Re-index tick-stamped events by continuous time.

	Meter and tempo tables are taken from ``timeline`` rather than ``events``
	so that the defaults it made active at tick 0 carry through to the score.
	"""

	timed = rekey_events(events, timeline.ticks_to_time)
	timed.meters = timeline.meter_changes.rekey(timeline.ticks_to_time)
	timed.tempi = timeline.tempo_changes.rekey(timeline.ticks_to_time)

	return timed


def to_counts (
	events: tickmeter.classifier.ClassifiedEvents[float],
	context: tickmeter.context.RunContext
) -> tickmeter.classifier.ClassifiedEvents[tickmeter.values.Count]:

	"""
	Quantize continuous-time events to ``Count`` positions.

	An event whose time cannot be quantized is recorded on ``context`` as a
	``QuantizationFailure`` and dropped; the rest of the piece carries on.
	"""

	quantizer = tickmeter.quantizer.Quantizer.from_settings(context.settings)

	def quantize (time: float) -> typing.Optional[tickmeter.values.Count]:

		try:
			return quantizer.closest_count(time)
		except tickmeter.errors.QuantizationFailure as e:
			context.fail(e, logger)
			return None

	return rekey_events(events, quantize)


def assemble (
	events: tickmeter.classifier.ClassifiedEvents[tickmeter.values.Count],
	context: tickmeter.context.RunContext,
	score: typing.Optional[tickmeter.score.Score] = None
) -> tickmeter.score.Score:

	"""
	Fill a score with the meter changes, tempo changes and parts of ``events``.

	Each note-on is closed by the earliest note-off of the same pitch at or
	after it. A note-on with no such note-off is recorded on ``context`` as an
	``UnterminatedNote`` and left out.

	A track becomes a part when it has at least one note-on and an instrument:
	its earliest program change, or ``settings.default_instrument`` when it has
	none. Tracks with notes but no instrument are skipped with a warning.
	"""

	if score is None:
		score = tickmeter.score.Score()

	for count, meter in events.meters.items():

		if not count.is_downbeat:
			context.warn(f"Meter change to {meter} at {count} is not on a barline, moving it to measure {count.measure}", logger)

		score.add_meter_change(meter, count.measure)

	for count, tempo in events.tempi.items():
		score.add_tempo_change(tempo, count)

	for track in events.tracks:

		if not track.has_notes:
			continue

		instrument = _track_instrument(track, context)

		if instrument is None:
			continue

		part = tickmeter.score.Part(instrument)

		for start, pitches in track.note_ons.items():

			for pitch in sorted(pitches):

				offs = track.note_offs.get(pitch)
				end = offs.ceiling(start) if offs is not None else None

				if end is None:
					context.fail(tickmeter.errors.UnterminatedNote(track.track, pitch, start), logger)
					continue

				part.add(tickmeter.score.Note(start=start, end=end[0], pitch=pitch))

		score.add_part(part)
		logger.debug(f"Track {track.track}: part with {len(part)} notes, instrument {instrument}")

	return score


def _track_instrument (
	track: tickmeter.classifier.TrackEvents[tickmeter.values.Count],
	context: tickmeter.context.RunContext
) -> typing.Optional[int]:

	first = track.instruments.first()

	if first is None:

		if context.settings.default_instrument is None:
			context.warn(f"Track {track.track} has notes but no program change, skipping it", logger)

		return context.settings.default_instrument

	# TODO: split the part when the program changes mid-track instead of keeping only the first program.
	if len(track.instruments) > 1:
		context.warn(f"Track {track.track}: ignoring {len(track.instruments) - 1} later program change(s)", logger)

	return first[1]
