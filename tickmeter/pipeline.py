"""
End-to-end import and export.

Import: event source -> classify -> timeline -> continuous time -> counts -> score.
Export: score -> inverse scheduler -> event sink.

Each run gets a fresh ``RunContext``. Each stage's input tables are released
as soon as the next representation exists.
"""

import dataclasses
import logging
import typing

import tickmeter.assembler
import tickmeter.classifier
import tickmeter.config
import tickmeter.context
import tickmeter.errors
import tickmeter.event_io
import tickmeter.inverse_scheduler
import tickmeter.midi_io
import tickmeter.score
import tickmeter.tick_timeline


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ImportResult:

	"""
	The score read from a source, with everything that went wrong along the way.
	"""

	score: tickmeter.score.Score
	timeline: tickmeter.tick_timeline.TickTimeline
	warnings: typing.List[str] = dataclasses.field(default_factory=list)
	errors: typing.List[tickmeter.errors.TickmeterError] = dataclasses.field(default_factory=list)

	@property
	def ok (self) -> bool:

		return not self.errors


@dataclasses.dataclass
class ExportResult:

	resolution: int
	warnings: typing.List[str] = dataclasses.field(default_factory=list)
	errors: typing.List[tickmeter.errors.TickmeterError] = dataclasses.field(default_factory=list)

	@property
	def ok (self) -> bool:

		return not self.errors


def read_score (
	source: tickmeter.event_io.EventSource,
	settings: typing.Optional[tickmeter.config.Settings] = None,
	score: typing.Optional[tickmeter.score.Score] = None
) -> ImportResult:

	"""
	Convert an event source into a score.

	Per-note and per-event problems (unterminated notes, positions that cannot
	be quantized) do not stop the run; they are returned in
	``ImportResult.errors``. Substituted defaults are listed in
	``ImportResult.warnings``.

	Parameters:
		source: Where the events come from.
		settings: Quantization and default values. Defaults to ``Settings()``.
		score: Score to add to. A new one is created when omitted.
	"""

	context = tickmeter.context.RunContext(settings=settings or tickmeter.config.Settings())

	logger.info("Classifying events...")
	ticks = tickmeter.classifier.classify(source, context)

	logger.info("Building timeline...")
	timeline = tickmeter.tick_timeline.TickTimeline.build(context.resolution, ticks.final_tick, ticks.meters, ticks.tempi, context)

	logger.info("Converting ticks to time...")
	times = tickmeter.assembler.to_time(ticks, timeline)
	del ticks

	logger.info("Quantizing...")
	counts = tickmeter.assembler.to_counts(times, context)
	del times

	logger.info("Assembling parts...")
	score = tickmeter.assembler.assemble(counts, context, score)
	del counts

	logger.info(f"Read {len(score.parts)} parts with {len(context.warnings)} warnings and {len(context.errors)} errors")

	return ImportResult(score=score, timeline=timeline, warnings=context.warnings, errors=context.errors)


def write_score (
	score: tickmeter.score.Score,
	sink: tickmeter.event_io.EventSink,
	settings: typing.Optional[tickmeter.config.Settings] = None
) -> ExportResult:

	"""
	Convert a score into tick-stamped events and hand them to ``sink``.
	"""

	context = tickmeter.context.RunContext(settings=settings or tickmeter.config.Settings())

	logger.info("Scheduling score...")
	tickmeter.inverse_scheduler.write(score, sink, context)

	return ExportResult(resolution=context.resolution, warnings=context.warnings, errors=context.errors)


def read_midi_file (filename: str, settings: typing.Optional[tickmeter.config.Settings] = None) -> ImportResult:

	"""Read a Standard MIDI File into a score."""

	return read_score(tickmeter.midi_io.MidoEventSource.open(filename), settings)


def write_midi_file (
	score: tickmeter.score.Score,
	filename: str,
	settings: typing.Optional[tickmeter.config.Settings] = None
) -> ExportResult:

	"""Write a score to a Standard MIDI File."""

	sink = tickmeter.midi_io.MidoEventSink()
	result = write_score(score, sink, settings)
	sink.save(filename)

	return result
