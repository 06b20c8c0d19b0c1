"""Include expansion engine.

Inlines every locally resolvable `#include` of a source file, recursively,
and records each decision in a FileNode tree. Includes that resolve to no
file are left verbatim for the real compiler.
"""
