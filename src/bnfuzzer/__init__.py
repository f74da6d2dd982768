"""
bnfuzzer: random text generation from BNF/ABNF-style grammars.

Packages
- bnfuzzer.core: lexer, parser, rule table, validators and generator.
- bnfuzzer.io: configuration, grammar file reading, sample writing.
- bnfuzzer.cli: the `bnfuzzer` command.
"""

__version__ = "0.1.0"
