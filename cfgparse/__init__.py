"""Context-free grammar parsing with the CYK algorithm (cfgparse).

Main components:

- A grammar store with two sorted rule indices, read off from a treebank or
  loaded from rule and lexicon files, with conversion to Chomsky Normal Form.
- A probabilistic grammar with relative frequency estimates.
- CYK chart parsers returning all parses, or the Viterbi parse(s).
"""
__version__ = '0.2.0'
