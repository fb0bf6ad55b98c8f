# esshell

`esshell` holds the building blocks of an extensible, functional shell in
the tradition of *es*: a lexer, parse-tree nodes and the rewriting rules
that build commands from them, wildcard matching, word splitting, exit
statuses, signal bookkeeping and a `printf`-style formatter. Each piece is
plain Python and can be used on its own.

## Modules

| Module | Purpose |
| --- | --- |
| `esshell.lexer` | Turns source text into tokens: `tokenize`, `Lexer`, `Token`, `TokenKind`, `LexError`. |
| `esshell.tree` | Parse-tree nodes: `Tree`, `NodeKind`, `mk`. |
| `esshell.syntax` | Rewriting rules for sequences, pipes, redirections, function definitions and `match` blocks (`mkseq`, `mkpipe`, `mkredir`, `redirect`, `mkmatch`, ...). |
| `esshell.term` | Values held in shell lists: `Term`, `Closure`, `Binding`, `mkstr`, `termcat`. |
| `esshell.match` | Wildcard matching with `*`, `?` and `[...]` classes and per-character quoting: `match`, `haswild`, `listmatch`, `extractmatches`. |
| `esshell.split` | Word splitting on separator characters: `fsplit`, `Splitter`. |
| `esshell.status` | Status lists and wait statuses: `istrue`, `exitstatus`, `mkstatus`, `status_message`. |
| `esshell.signals` | Signal names and messages and a table of per-signal effects: `signumber`, `signame`, `sigmessage`, `parse_signal_specs`, `SigEffect`, `SignalTable`. |
| `esshell.fmt` | A formatter with an extensible table of conversions: `sprint`, `fprint`, `Format`, `install_conversion`, `FormatError`. |
| `esshell.opt` | Option parsing over a list of terms: `OptionParser`, `OptionError`. |
| `esshell.files` | Opening files by redirection mode: `OpenKind`, `open_kind`, `eopen`. |

## A short tour

```python
from esshell.lexer import tokenize
from esshell.split import fsplit
from esshell.match import match, extractmatches
from esshell.status import istrue, exitstatus, mkstatus
from esshell.term import mkstr
from esshell.fmt import sprint
from esshell.opt import OptionParser

# Lex a command line; ">[2=1]" becomes a DUP token carrying a %dup tree.
for token in tokenize("echo hello >[2=1] | wc -l\n"):
    print(token.kind, token.text)

# Split words on separators, coalescing runs of them.
fsplit(" \t", ["alpha  beta\tgamma"], True)   # ['alpha', 'beta', 'gamma']

# Wildcards, and the parts of a subject that they matched.
match("foo.c", "*.c")                         # True
extractmatches(["foo.c"], ["*.c"])            # ['foo']

# A status list is true when every element is empty or "0".
istrue([mkstr("0"), mkstr("")])               # True
exitstatus([mkstr("3")])                      # 3
mkstatus(3 << 8)                              # '3'

# The shell's own formatter.
sprint("%-5s|%04d", "ab", 7)                  # 'ab   |0007'

# Options at the front of an argument list.
parser = OptionParser([mkstr("-n"), mkstr("file")], "$&dot", ". [-n] file")
parser.next_option("n")                       # 'n'
parser.next_option("n")                       # None
parser.rest()                                 # [Term(text='file', closure=None)]
```

Errors are raised as exceptions: `LexError` for bad lexer input,
`OptionError` for bad options, `FormatError` for unknown conversions or
missing arguments, and `ValueError` for malformed trees, unknown signal
names and bad `%openfile` modes.

## What this package does not do

There is no shell to run here: no command, no parser that assembles
tokens into a full tree, and no evaluator that executes trees. Variable
storage, the environment, primitives, resource limits and process control
are not part of the package. `SignalTable` records the effect chosen for
each signal but installs no handlers.

## Requirements

Python 3.10 or later. No third-party packages are needed at run time;
the tests use pytest (`pip install esshell[test]`).