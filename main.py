from rich.pretty import pprint

from argvault import *

parser = Parser(
    "This program will print a message a number of times.\nHere are the possible settings:",
    shell=True,
    colorful=True,
)
message = parser.string("msg", "m", descr="The message to print.", required=True)
times = parser.uint("times", "t", 1, "The number of times the message is printed.")
numbered = parser.bool("num", "n", descr="Print line numbers for the message.")
verbose = parser.bool("verbose", descr="Dump the parsed handles before printing.")


if __name__ == '__main__':
    invoke(parser)
    if verbose.value:
        pprint(parser.registry)
    for index in range(times.value):
        if numbered.value:
            print("%3d: " % (index + 1), end="")
        print(message.value)
