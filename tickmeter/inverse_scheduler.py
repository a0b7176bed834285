"""
Turns a score back into tick-stamped events for an event sink.

Track 0 carries meter and tempo changes; every part gets a track of its own
with a program change at tick 0 followed by its notes.
"""

import logging
import typing

import tickmeter.constants
import tickmeter.context
import tickmeter.errors
import tickmeter.event_io
import tickmeter.messages
import tickmeter.score
import tickmeter.tick_timeline
import tickmeter.values


logger = logging.getLogger(__name__)

MELODIC_CHANNELS: typing.List[int] = [
	channel for channel in range(tickmeter.constants.MIDI_CHANNELS)
	if channel != tickmeter.constants.MIDI_PERCUSSION_CHANNEL
]


def channel_for_part (index: int) -> int:

	"""
	MIDI channel for the part at ``index``, skipping the percussion channel and wrapping after 15 parts.
	"""

	return MELODIC_CHANNELS[index % len(MELODIC_CHANNELS)]


def schedule (
	score: tickmeter.score.Score,
	context: tickmeter.context.RunContext
) -> typing.List[typing.List[tickmeter.messages.TimedMessage]]:

	"""
	Expand a score into per-track, tick-sorted events at ``settings.export_resolution``.

	Meter changes lay out the measures (see
	``TickTimeline.from_meter_changes``); tempo changes and notes are then
	placed by converting their ``Count`` to continuous time and interpolating
	a tick. When the score has no meter or tempo at its start, the defaults
	from ``context.settings`` are used with a warning. A position that cannot
	be converted is recorded on ``context`` and its event is left out. Notes
	that start and end on the same tick have no MIDI form and are skipped with
	a warning.
	"""

	resolution = context.settings.export_resolution
	context.resolution = resolution

	meter_changes = list(score.meter_changes())

	if not meter_changes or meter_changes[0][0] != 0:
		default_meter = context.settings.default_meter
		context.warn(str(tickmeter.errors.MissingInitialTempoOrMeter("meter", default_meter)), logger)
		meter_changes.insert(0, (0, default_meter))

	timeline = tickmeter.tick_timeline.TickTimeline.from_meter_changes(resolution, meter_changes)

	control: typing.List[tickmeter.messages.TimedMessage] = []

	for measure, meter in meter_changes:

		tick = timeline.time_to_tick(float(measure))
		control.append(tickmeter.messages.TimedMessage(tick, tickmeter.messages.MeterChange(meter.numerator, meter.denominator_power)))

	tempo_changes = list(score.tempo_changes())

	if not tempo_changes or tempo_changes[0][0].value != 0:
		default_tempo = context.settings.default_tempo
		context.warn(str(tickmeter.errors.MissingInitialTempoOrMeter("tempo", default_tempo)), logger)
		tempo_changes.insert(0, (tickmeter.values.Count(0), default_tempo))

	for count, tempo in tempo_changes:

		tick = _count_to_tick(timeline, count, context)

		if tick is not None:
			control.append(tickmeter.messages.TimedMessage(tick, tickmeter.messages.TempoChange(tempo.microseconds_per_quarter)))

	tracks = [sorted(control, key=tickmeter.messages.TimedMessage.sort_key)]

	for index, part in enumerate(score.parts):

		channel = channel_for_part(index)
		events = [tickmeter.messages.TimedMessage(0, tickmeter.messages.ProgramChange(program=part.instrument, channel=channel))]

		for note in part:

			start = _count_to_tick(timeline, note.start, context)
			end = _count_to_tick(timeline, note.end, context)

			if start is None or end is None:
				continue

			# Same-tick note-offs sort before note-ons, so this pair would leave the pitch sounding.
			if end == start:
				context.warn(f"Part {index}: skipping zero-length note {note.pitch} at {note.start}", logger)
				continue

			events.append(tickmeter.messages.TimedMessage(start, tickmeter.messages.NoteOn(pitch=note.pitch, velocity=context.settings.export_velocity, channel=channel)))
			events.append(tickmeter.messages.TimedMessage(end, tickmeter.messages.NoteOff(pitch=note.pitch, channel=channel)))

		tracks.append(sorted(events, key=tickmeter.messages.TimedMessage.sort_key))

	logger.debug(f"Scheduled {len(tracks)} tracks at resolution {resolution}")

	return tracks


def write (
	score: tickmeter.score.Score,
	sink: tickmeter.event_io.EventSink,
	context: tickmeter.context.RunContext
) -> None:

	"""
	Schedule ``score`` and hand the events to ``sink``.
	"""

	tracks = schedule(score, context)
	sink.accept(context.resolution, tracks)


def _count_to_tick (
	timeline: tickmeter.tick_timeline.TickTimeline,
	count: tickmeter.values.Count,
	context: tickmeter.context.RunContext
) -> typing.Optional[int]:

	try:
		return timeline.time_to_tick(float(count))
	except tickmeter.errors.TimelineLookupOutOfRange as e:
		context.fail(e, logger)
		return None
