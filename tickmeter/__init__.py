"""
tickmeter - convert between tick-stamped MIDI events and measure-based scores.

MIDI stores time as integer ticks at a fixed resolution (ticks per quarter
note). A score stores it as positions in measures: "measure 3, two thirds of
the way through". tickmeter converts between the two, in both directions:

- **Import.** Ticks are integrated into continuous, measure-relative time
  across every meter and tempo change, then snapped to the simplest
  fraction of a measure within a small tolerance (``1.3333`` becomes
  ``1 + 1/3``). Note-ons are paired with their note-offs and gathered into
  parts.
- **Export.** Quantized positions are laid back out as ticks, one
  breakpoint per meter change, and written as MIDI events.

Byte-level MIDI decoding and encoding is left to ``mido`` through the
adapters in ``tickmeter.midi_io``; any other ``EventSource`` or
``EventSink`` can be plugged in instead.

Minimal example:

    ```python
    import tickmeter

    result = tickmeter.read_midi_file("song.mid")

    for part in result.score:
        for note in part:
            print(note.start, note.end, note.pitch)

    tickmeter.write_midi_file(result.score, "quantized.mid")
    ```

Package-level exports: ``Count``, ``Meter``, ``Tempo``, ``Score``, ``Part``,
``Note``, ``Settings``, ``TickTimeline``, ``Quantizer``, ``read_score``,
``write_score``, ``read_midi_file``, ``write_midi_file``.
"""

import tickmeter.config
import tickmeter.pipeline
import tickmeter.quantizer
import tickmeter.score
import tickmeter.tick_timeline
import tickmeter.values


Count = tickmeter.values.Count
Meter = tickmeter.values.Meter
Tempo = tickmeter.values.Tempo
Score = tickmeter.score.Score
Part = tickmeter.score.Part
Note = tickmeter.score.Note
Settings = tickmeter.config.Settings
TickTimeline = tickmeter.tick_timeline.TickTimeline
Quantizer = tickmeter.quantizer.Quantizer
read_score = tickmeter.pipeline.read_score
write_score = tickmeter.pipeline.write_score
read_midi_file = tickmeter.pipeline.read_midi_file
write_midi_file = tickmeter.pipeline.write_midi_file
