"""
Conversion between ticks and continuous, measure-relative time.

Continuous time counts measures: 1.0 is one full measure of whatever meter
is active, so a quarter note lasts 0.25 under 4/4 and 0.333... under 3/4.
Tempo has no effect on continuous time, but every tempo change still gets a
breakpoint so that it can be placed exactly.
"""

import logging
import math
import typing

import tickmeter.constants
import tickmeter.context
import tickmeter.errors
import tickmeter.indexed_timeline
import tickmeter.values


logger = logging.getLogger(__name__)


class TickTimeline:

	"""
	A piecewise-linear map from ticks to continuous time.

	The map is stored as breakpoints (tick -> time) at the start of the piece,
	at every meter and tempo change and at the end. Between two breakpoints the
	slope is ``1 / ticks_per_measure`` of the meter active at the earlier one.

	Build one with ``TickTimeline.build()`` when reading ticks, or with
	``TickTimeline.from_meter_changes()`` when writing a score.
	"""

	def __init__ (
		self,
		resolution: int,
		breakpoints: tickmeter.indexed_timeline.IndexedTimeline[int, float],
		meters: tickmeter.indexed_timeline.IndexedTimeline[int, tickmeter.values.Meter],
		tempi: typing.Optional[tickmeter.indexed_timeline.IndexedTimeline[int, tickmeter.values.Tempo]] = None
	) -> None:

		if resolution <= 0:
			raise ValueError(f"Resolution must be positive, got {resolution}")

		if not meters or meters.first()[0] != 0:  # type: ignore[index]
			raise ValueError("A meter must be active from tick 0")

		self.resolution = resolution
		self._breakpoints = breakpoints
		self._meters = meters
		self._tempi = tempi if tempi is not None else tickmeter.indexed_timeline.IndexedTimeline()
		self._by_time: tickmeter.indexed_timeline.IndexedTimeline[float, int] = tickmeter.indexed_timeline.IndexedTimeline()

		previous_time = -math.inf

		for tick, time in breakpoints.items():

			if time <= previous_time:
				raise ValueError(f"Breakpoint times must increase with ticks (tick {tick} maps to {time})")

			self._by_time[time] = tick
			previous_time = time

	@classmethod
	def build (
		cls,
		resolution: int,
		final_tick: int,
		meters: tickmeter.indexed_timeline.IndexedTimeline[int, tickmeter.values.Meter],
		tempi: tickmeter.indexed_timeline.IndexedTimeline[int, tickmeter.values.Tempo],
		context: tickmeter.context.RunContext
	) -> "TickTimeline":

		"""
		Integrate a piece's meter and tempo changes into a breakpoint schedule.

		Starting from tick 0 and time 0.0, the schedule jumps straight to the
		nearest of the next meter change, the next tempo change and
		``final_tick``, adding ``elapsed_ticks / ticks_per_measure`` of the meter
		active over that stretch. A change only affects ticks from its own tick
		onward.

		The earliest meter and tempo are moved to tick 0. When there are
		none, the defaults from ``context.settings`` are used and a warning is
		recorded.

		Parameters:
			resolution: Ticks per quarter note.
			final_tick: Last tick of the piece; the schedule ends here.
			meters: Meter changes by tick. Not modified.
			tempi: Tempo changes by tick. Not modified.
			context: Receives warnings about substituted defaults.
		"""

		meters = tickmeter.indexed_timeline.IndexedTimeline(meters.items())
		tempi = tickmeter.indexed_timeline.IndexedTimeline(tempi.items())

		_ensure_initial(meters, "meter", context.settings.default_meter, context)
		_ensure_initial(tempi, "tempo", context.settings.default_tempo, context)

		final_tick = max(final_tick, meters.last()[0], tempi.last()[0])  # type: ignore[index]

		breakpoints: tickmeter.indexed_timeline.IndexedTimeline[int, float] = tickmeter.indexed_timeline.IndexedTimeline({0: 0.0})

		tick = 0
		time = 0.0

		while tick < final_tick:

			next_tick = final_tick

			for changes in (meters, tempi):
				upcoming = changes.higher(tick)
				if upcoming is not None and upcoming[0] < next_tick:
					next_tick = upcoming[0]

			meter = meters.floor(tick)[1]  # type: ignore[index]
			time += (next_tick - tick) / meter.ticks_per_measure(resolution)
			tick = next_tick

			breakpoints[tick] = time

		logger.debug(f"Built timeline with {len(breakpoints)} breakpoints up to tick {final_tick}")

		return cls(resolution, breakpoints, meters, tempi)

	@classmethod
	def from_meter_changes (
		cls,
		resolution: int,
		meter_changes: typing.Iterable[typing.Tuple[int, tickmeter.values.Meter]],
		tail_measures: int = tickmeter.constants.EXPORT_TAIL_MEASURES
	) -> "TickTimeline":

		"""
		Lay out measures as ticks, for writing a score.

		Each meter change, keyed by measure number, becomes a breakpoint whose
		tick is the previous breakpoint's tick plus the measures in between
		times the previous meter's ticks per measure. A final breakpoint is
		placed ``tail_measures`` after the last change so that any later
		position can still be converted. The first change must be at measure 0.
		"""

		if tail_measures <= 0:
			raise ValueError("tail_measures must be positive")

		breakpoints: tickmeter.indexed_timeline.IndexedTimeline[int, float] = tickmeter.indexed_timeline.IndexedTimeline()
		meters: tickmeter.indexed_timeline.IndexedTimeline[int, tickmeter.values.Meter] = tickmeter.indexed_timeline.IndexedTimeline()

		exact_tick = 0.0
		last_measure = 0
		last_meter: typing.Optional[tickmeter.values.Meter] = None

		for measure, meter in sorted(meter_changes, key=lambda change: change[0]):

			if last_meter is None:
				if measure != 0:
					raise ValueError(f"The first meter change must be at measure 0, got {measure}")
			else:
				exact_tick += (measure - last_measure) * last_meter.ticks_per_measure(resolution)

			tick = int(round(exact_tick))
			breakpoints[tick] = float(measure)
			meters[tick] = meter

			last_measure = measure
			last_meter = meter

		if last_meter is None:
			raise ValueError("At least one meter change is required")

		exact_tick += tail_measures * last_meter.ticks_per_measure(resolution)
		breakpoints[int(round(exact_tick))] = float(last_measure + tail_measures)

		return cls(resolution, breakpoints, meters)

	@property
	def final_tick (self) -> int:

		return self._breakpoints.last()[0]  # type: ignore[index]

	@property
	def meter_changes (self) -> tickmeter.indexed_timeline.IndexedTimeline[int, tickmeter.values.Meter]:

		return self._meters

	@property
	def tempo_changes (self) -> tickmeter.indexed_timeline.IndexedTimeline[int, tickmeter.values.Tempo]:

		return self._tempi

	def breakpoints (self) -> typing.List[typing.Tuple[int, float]]:

		return self._breakpoints.items()

	def meter_at (self, tick: int) -> tickmeter.values.Meter:

		found = self._meters.floor(max(tick, 0))
		return found[1]  # type: ignore[index]

	def tempo_at (self, tick: int) -> typing.Optional[tickmeter.values.Tempo]:

		found = self._tempi.floor(max(tick, 0))
		return found[1] if found is not None else None

	def ticks_to_time (self, tick: int) -> float:

		"""
		Continuous time of ``tick``.

		Integrates from the breakpoint at or before ``tick`` using the meter
		active there, so breakpoints map exactly to their recorded times. Ticks
		after the last breakpoint continue at the last meter's rate.
		"""

		found = self._breakpoints.floor(tick)

		if found is None:
			raise tickmeter.errors.TimelineLookupOutOfRange(tick, self._tick_span())

		floor_tick, floor_time = found

		if floor_tick == tick:
			return floor_time

		meter = self.meter_at(floor_tick)

		return floor_time + (tick - floor_tick) / meter.ticks_per_measure(self.resolution)

	def time_to_tick (self, time: float) -> int:

		"""
		Tick at continuous ``time``, interpolated between the surrounding breakpoints.

		Raises ``TimelineLookupOutOfRange`` when the timeline is empty or
		``time`` lies outside the first and last breakpoint.
		"""

		if not self._by_time:
			raise tickmeter.errors.TimelineLookupOutOfRange(time, None)

		earlier = self._by_time.floor(time) if math.isfinite(time) else None
		later = self._by_time.ceiling(time) if math.isfinite(time) else None

		if earlier is None or later is None:
			raise tickmeter.errors.TimelineLookupOutOfRange(time, (self._by_time.first()[0], self._by_time.last()[0]))  # type: ignore[index]

		earlier_time, earlier_tick = earlier
		later_time, later_tick = later

		if earlier_time == later_time:
			return earlier_tick

		relative_position = (time - earlier_time) / (later_time - earlier_time)

		return int(round(earlier_tick + relative_position * (later_tick - earlier_tick)))

	def _tick_span (self) -> typing.Optional[typing.Tuple[int, int]]:

		if not self._breakpoints:
			return None

		return self._breakpoints.first()[0], self._breakpoints.last()[0]  # type: ignore[index]


def _ensure_initial (
	changes: tickmeter.indexed_timeline.IndexedTimeline[int, typing.Any],
	kind: str,
	default: typing.Any,
	context: tickmeter.context.RunContext
) -> None:

	"""
	Make sure ``changes`` has a value at tick 0: the earliest change moved there,
	or ``default`` with a warning.
	"""

	first = changes.first()

	if first is None:
		context.warn(str(tickmeter.errors.MissingInitialTempoOrMeter(kind, default)), logger)
		changes[0] = default

	elif first[0] != 0:
		del changes[first[0]]
		changes[0] = first[1]
