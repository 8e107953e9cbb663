"""
This freezes parsed trees into Python modules that rebuild them on import.

{0}

For example:

    py -m icebox generate --pkg mylang.stdlib --parser mylang.parser:parse_dir

will parse every directory under the current one and write the frozen modules.

    py -m icebox generate -h

will explain all the arguments.
"""
import sys

from icebox.cmdline import parser, run

if len(sys.argv) > 1:
	exit(run(parser.parse_args()))
else:
	print(__doc__.strip().format(parser.format_usage()))
