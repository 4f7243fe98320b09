"""
Console entry point.

    $ python -m arglite --foo --bar= --qux=25 "--list=[1, 2, 3]"
    {'foo': True, 'bar': '', 'qux': 25, 'list': [1, 2, 3]}

The arguments are parsed with the default options and the resulting mapping
is pretty-printed on stdout. A value that looks like an array or object
literal but could not be parsed is kept as a string, and the reason is
reported on stderr.
"""
import sys

from rich.pretty import pprint
from rich.text import Text

from .faults import LiteralSyntaxError, console
from .options import parse_options
from .utils import Unset
from .values import parse_literal


def main(args=Unset, /):
    result = parse_options(args)
    pprint(result, expand_all=False)

    for key, value in result.items():
        if not isinstance(value, str) or not value.strip().startswith(("[", "{")):
            continue
        try:
            parse_literal(value.strip())
        except LiteralSyntaxError as error:
            console.print(Text("value of %r kept as text:" % key, style="dim"))
            console.print(error)
    return 0


if __name__ == '__main__':
    sys.exit(main())
