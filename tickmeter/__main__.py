import argparse
import logging
import sys

import tickmeter.config
import tickmeter.pipeline


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main () -> None:

	"""
	Read a MIDI file, print its quantized score and optionally write it back out.
	"""

	parser = argparse.ArgumentParser(prog="tickmeter", description="Quantize a MIDI file to measure positions")
	parser.add_argument("input", help="MIDI file to read")
	parser.add_argument("--config", default="tickmeter.yaml", help="YAML settings file (default: tickmeter.yaml)")
	parser.add_argument("--write", metavar="OUTPUT", help="Write the quantized score to this MIDI file")
	args = parser.parse_args()

	settings = tickmeter.config.load_settings(args.config)
	result = tickmeter.pipeline.read_midi_file(args.input, settings)

	for measure, meter in result.score.meter_changes():
		print(f"measure {measure}: {meter}")

	for count, tempo in result.score.tempo_changes():
		print(f"{count}: {tempo}")

	for index, part in enumerate(result.score):
		print(f"\nPart {index} (program {part.instrument}, {len(part)} notes)")
		for note in part:
			print(f"  {note.start} -> {note.end}  pitch {note.pitch}")

	for error in result.errors:
		print(f"error: {error}", file=sys.stderr)

	if args.write:
		export = tickmeter.pipeline.write_midi_file(result.score, args.write, settings)
		for error in export.errors:
			print(f"error: {error}", file=sys.stderr)

	if not result.ok:
		sys.exit(1)


if __name__ == "__main__":
	main()
