import json
import logging
import sys
import time

from nargs import check_for_unused_function_args
from nargs_flags import FLAG_OPTIONS, NargsFlags, apply_flag_option


USAGE = """Usage of nargs:

nargs [flags] # runs on the package in the current directory

nargs [flags] [files | directories | dir/...]

Flags:
  --named-returns / --no-named-returns          report unused named results (default off)
  --receivers / --no-receivers                  report unused method receivers (default on)
  --tests / --no-tests                          include test files (default on)
  --set-exit-status / --no-set-exit-status      exit 1 when issues are found (default on)
  --json                                        print a JSON payload instead of plain lines
  --verbose                                     log each checked file
"""


def _round_ms(value):
    return round(max(0.0, float(value)), 3)


def _fail(message, json_mode):
    if json_mode:
        print(json.dumps({"ok": False, "error": message}))
    else:
        print(message, file=sys.stderr)
        print(USAGE, file=sys.stderr)
    return 2


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    json_mode = "--json" in args
    verbose = False
    flags = NargsFlags()
    paths = []

    for arg in args:
        if arg in ("--json", "--text"):
            json_mode = arg == "--json"
        elif arg in ("-v", "--verbose"):
            verbose = True
        elif arg in ("-h", "--help"):
            print(USAGE)
            return 0
        elif apply_flag_option(flags, arg):
            continue
        elif arg.startswith("-"):
            valid = ", ".join(sorted(FLAG_OPTIONS))
            return _fail(f"Unknown option: {arg}. Valid flags: {valid}.", json_mode)
        else:
            paths.append(arg)

    # Remove log timestamp
    logging.basicConfig(format="%(message)s", level=logging.INFO if verbose else logging.WARNING)

    start = time.perf_counter()
    results, exit_with_status, errors = check_for_unused_function_args(paths, flags)
    total_ms = _round_ms((time.perf_counter() - start) * 1000.0)

    if json_mode:
        print(
            json.dumps(
                {
                    "ok": not errors,
                    "results": results,
                    "errors": [{"path": path, "error": message} for path, message in errors],
                    "exit_with_status": exit_with_status,
                    "flags": flags.as_dict(),
                    "timing_ms": {"total": total_ms},
                }
            )
        )
    else:
        for line in results:
            sys.stdout.write(line)

    if errors or exit_with_status:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
