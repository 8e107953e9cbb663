"""
This freezes parsed trees into Python modules that rebuild them on import.

{0}

For example:

    icebox generate --pkg mylang.stdlib --parser mylang.parser:parse_dir

will parse every directory under the current one, and leave a frozen_gen.py
in each directory that holds a package, plus a builtin_gen.py at the top
which imports all of them.

    icebox generate -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path
from traceback import TracebackException

parser = argparse.ArgumentParser(
	prog="icebox",
	description="Freeze parsed trees into importable Python source.",
)
subcommands = parser.add_subparsers(dest="command", required=True)
generate = subcommands.add_parser("generate", help="Generate Python source from the parsed contents of a directory tree.")
generate.add_argument("--pkg", required=True, help="The fully qualified (dotted) package name of the root directory.")
generate.add_argument("--parser", required=True, help="module:function to call on each directory; it returns {package name: tree}.")
generate.add_argument("--root-dir", default=".", help="The root level directory for all packages.")
generate.add_argument("--import-file", default="builtin_gen.py", help="Location relative to root-dir to place a file to import all generated modules.")
generate.add_argument("--unit-file", default="frozen_gen.py", help="Name of the file generated in each directory.")
generate.add_argument("--register", default="icebox.registry:register", help="module:function each generated module calls with its tree.")
generate.add_argument('-v', "--verbose", action="count", help="Say what is going on along the way.")

def run(args):
	from .diagnostics import Report, TooManyIssues
	from .modularity import Generator, BadPluginSpec, load_plugin
	from .ontology import FreezeError
	report = Report(verbose=args.verbose)
	try:
		try:
			generator = Generator(
				report, load_plugin(args.parser), args.pkg, Path(args.root_dir),
				import_file=args.import_file, unit_file=args.unit_file, register=args.register,
			)
		except BadPluginSpec as ex:
			report.bad_plugin(*ex.args)
			report.complain_to_console()
			return 1
		try: generator.run()
		except (FreezeError, RecursionError) as ex:
			report.cannot_freeze(generator.current, ex)
		except Exception as ex:
			report.broken_unit(generator.current, TracebackException.from_exception(ex))
		if report.sick():
			report.complain_to_console()
			return 1
	except TooManyIssues:
		report.complain_to_console()
		return 1
	report.info("Froze %d module(s)." % len(generator.generated))
	return 0

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
