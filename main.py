import sys

from rich.pretty import pprint

from argvet import *


if __name__ == '__main__':
    try:
        args = CommandLineArgs(
            [{"arg": "name", "type": "string"}],
            [
                {"arg": "env", "enum": ["dev", "prod"], "def": "dev"},
                {"arg": "verbose", "type": "boolean", "def": False},
                {"arg": "tags", "type": "csv", "def": ()},
            ],
        )
    except ArgumentException as exception:
        sys.exit(report(exception, fancy=True))
    pprint(args)
