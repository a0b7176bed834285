"""
Event source and sink backed by ``mido``.

``mido`` does the byte-level work (chunk parsing, running status, variable
length deltas); these adapters only translate between its message objects
and ``tickmeter.messages``.
"""

import logging
import typing

import mido

import tickmeter.event_io
import tickmeter.messages


logger = logging.getLogger(__name__)

# mido decodes text meta events as latin-1 by default; keep the same mapping
# so bytes survive a read/write cycle unchanged.
TEXT_ENCODING = "latin-1"


def from_mido (message: typing.Union[mido.Message, mido.MetaMessage]) -> tickmeter.messages.Message:

	"""
	Translate one mido message into the message variant.
	"""

	if message.type == "note_on":
		return tickmeter.messages.NoteOn(pitch=message.note, velocity=message.velocity, channel=message.channel)

	elif message.type == "note_off":
		return tickmeter.messages.NoteOff(pitch=message.note, channel=message.channel)

	elif message.type == "program_change":
		return tickmeter.messages.ProgramChange(program=message.program, channel=message.channel)

	elif message.type == "set_tempo":
		return tickmeter.messages.TempoChange(microseconds_per_quarter=message.tempo)

	elif message.type == "time_signature":
		return tickmeter.messages.MeterChange(numerator=message.numerator, denominator_power=message.denominator.bit_length() - 1)

	elif message.type == "text":
		return tickmeter.messages.Text(data=message.text.encode(TEXT_ENCODING, errors="replace"))

	return tickmeter.messages.Other(kind=message.type, payload=message)


def to_mido (message: tickmeter.messages.Message) -> typing.Optional[typing.Union[mido.Message, mido.MetaMessage]]:

	"""
	Translate one variant message into a mido message, or None when it has no MIDI form.
	"""

	if isinstance(message, tickmeter.messages.NoteOn):
		return mido.Message("note_on", channel=message.channel, note=message.pitch, velocity=message.velocity)

	elif isinstance(message, tickmeter.messages.NoteOff):
		return mido.Message("note_off", channel=message.channel, note=message.pitch, velocity=0)

	elif isinstance(message, tickmeter.messages.ProgramChange):
		return mido.Message("program_change", channel=message.channel, program=message.program)

	elif isinstance(message, tickmeter.messages.TempoChange):
		return mido.MetaMessage("set_tempo", tempo=message.microseconds_per_quarter)

	elif isinstance(message, tickmeter.messages.MeterChange):
		return mido.MetaMessage("time_signature", numerator=message.numerator, denominator=2 ** message.denominator_power)

	elif isinstance(message, tickmeter.messages.Text):
		return mido.MetaMessage("text", text=message.data.decode(TEXT_ENCODING))

	elif isinstance(message, tickmeter.messages.Other) and isinstance(message.payload, (mido.Message, mido.MetaMessage)):

		# The sink closes every track itself.
		if message.payload.type == "end_of_track":
			return None

		return message.payload.copy(time=0)

	return None


class MidoEventSource:

	"""
	Reads the events of a ``mido.MidiFile`` as absolute-tick timed messages.
	"""

	def __init__ (self, midi_file: mido.MidiFile) -> None:

		if midi_file.type == 2:
			raise ValueError("Type 2 (asynchronous) MIDI files are not supported")

		self.midi_file = midi_file
		self.resolution: int = midi_file.ticks_per_beat
		self._tracks = [self._read_track(track) for track in midi_file.tracks]
		self.length: int = max((events[-1].tick for events in self._tracks if events), default=0)

	@classmethod
	def open (cls, filename: str) -> "MidoEventSource":

		logger.info(f"Reading MIDI file {filename}")

		return cls(mido.MidiFile(filename))

	@staticmethod
	def _read_track (track: mido.MidiTrack) -> typing.List[tickmeter.messages.TimedMessage]:

		"""Accumulate delta times into absolute ticks."""

		events: typing.List[tickmeter.messages.TimedMessage] = []
		tick = 0

		for message in track:
			tick += message.time
			events.append(tickmeter.messages.TimedMessage(tick, from_mido(message)))

		return events

	def tracks (self) -> typing.Sequence[typing.Iterable[tickmeter.messages.TimedMessage]]:

		return self._tracks


class MidoEventSink:

	"""
	Collects timed messages into a Type 1 ``mido.MidiFile``, one MIDI track per track.
	"""

	def __init__ (self) -> None:

		self.midi_file: typing.Optional[mido.MidiFile] = None

	def accept (self, resolution: int, tracks: typing.Sequence[tickmeter.event_io.TrackEvents]) -> None:

		midi_file = mido.MidiFile(type=1, ticks_per_beat=resolution)

		for events in tracks:

			midi_track = mido.MidiTrack()
			last_tick = 0

			for event in sorted(events, key=tickmeter.messages.TimedMessage.sort_key):

				message = to_mido(event.message)

				if message is None:
					logger.debug(f"No MIDI form for {event.message!r}, skipping")
					continue

				# Deltas are never negative because events are sorted by tick.
				message.time = event.tick - last_tick
				midi_track.append(message)
				last_tick = event.tick

			midi_track.append(mido.MetaMessage("end_of_track", time=0))
			midi_file.tracks.append(midi_track)

		self.midi_file = midi_file

	def save (self, filename: str) -> None:

		"""Write the collected MIDI file to disk."""

		if self.midi_file is None:
			raise ValueError("Nothing to save: no events have been accepted")

		logger.info(f"Saving MIDI file ({len(self.midi_file.tracks)} tracks) to {filename}")

		self.midi_file.save(filename)
